import pytest
from fastapi.testclient import TestClient

from artfest import services
from artfest.config import Settings
from artfest.main import app
from artfest.store import MemoryStore, SqliteStore

ADMIN_PASSWORD = "secret"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SqliteStore(str(tmp_path / "artfest.sqlite"))


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(str(tmp_path / "artfest.sqlite"))


@pytest.fixture
def client(store):
    old_store, old_settings = app.state.store, app.state.settings
    app.state.store = store
    app.state.settings = Settings(store="memory", admin_password=ADMIN_PASSWORD)
    yield TestClient(app)
    app.state.store, app.state.settings = old_store, old_settings


@pytest.fixture
def festival(store):
    """Two events and three units with scores already entered."""
    services.add_event(store, "Painting")
    services.add_event(store, "Sculpture")
    ids = {
        "weavers": services.add_unit(store, "Chromatic Weavers", credential_id="WEAVE1"),
        "marble": services.add_unit(store, "Marble Sculptors", credential_id="MARB1"),
        "pixels": services.add_unit(store, "Digital Canvas Crew", credential_id="PIX1"),
    }
    services.update_score(store, ids["weavers"], "Painting", 10)
    services.update_score(store, ids["weavers"], "Sculpture", 20)
    services.update_score(store, ids["marble"], "Painting", 50)
    services.update_score(store, ids["pixels"], "Sculpture", 10)
    return ids
