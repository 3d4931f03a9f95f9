import logging

from artfest import main, services
from artfest.config import Settings
from artfest.main import app
from artfest.store import MemoryStore, StoreError

ADMIN_PASSWORD = "secret"


def admin_post(client, url, **data):
    data.setdefault("admin_password", ADMIN_PASSWORD)
    return client.post(url, data=data, follow_redirects=False)


class TestPublicPages:
    def test_scoreboard_lists_units_by_rank(self, client, festival):
        res = client.get("/")
        assert res.status_code == 200
        html = res.text
        assert html.index("Marble Sculptors") < html.index("Chromatic Weavers") < html.index("Digital Canvas Crew")
        assert "<th>Painting</th>" in html and "<th>Sculpture</th>" in html

    def test_scoreboard_search(self, client, festival):
        html = client.get("/", params={"q": "weav"}).text
        assert "Chromatic Weavers" in html
        assert "Marble Sculptors" not in html
        assert "<td>2</td><td>Chromatic Weavers</td>" in html

    def test_scoreboard_empty_search(self, client, festival):
        assert "No units match your search." in client.get("/", params={"q": "zzz"}).text

    def test_store_failure_shows_problem_banner(self, client, store, monkeypatch):
        def broken(collection):
            raise StoreError("database unavailable")

        monkeypatch.setattr(store, "get_all", broken)
        res = client.get("/")
        assert res.status_code == 200
        assert "There was a problem loading the scoreboard." in res.text

    def test_gallery_and_venue(self, client, store):
        services.add_gallery_image(store, "https://img/1.jpg", alt="Light installation")
        services.add_venue_details(store, "B-12", "Painting")
        assert "Light installation" in client.get("/gallery").text
        html = client.get("/venue").text
        assert "B-12" in html and "Painting" in html


class TestUnitLogin:
    def test_login_redirects_to_dashboard(self, client, store, festival):
        res = client.post("/login", data={"credential_id": "WEAVE1"}, follow_redirects=False)
        assert res.status_code == 303
        assert res.headers["location"] == f"/dashboard?unit_id={festival['weavers']}&credential=WEAVE1"

    def test_bad_credential(self, client, festival):
        res = client.post("/login", data={"credential_id": "NOPE"}, follow_redirects=False)
        assert res.status_code == 200
        assert "Invalid credential ID." in res.text

    def test_dashboard_shows_scores_and_counts_view(self, client, store, festival):
        services.add_gallery_image(store, "https://img/w.jpg", alt="Woven fabric", unit_id=festival["weavers"])
        services.add_gallery_image(store, "https://img/m.jpg", alt="Marble statue", unit_id=festival["marble"])

        res = client.get("/dashboard", params={"unit_id": festival["weavers"], "credential": "WEAVE1"})
        assert res.status_code == 200
        assert "Chromatic Weavers" in res.text
        assert "Woven fabric" in res.text
        assert "Marble statue" not in res.text
        assert "Total: <b>30</b>" in res.text
        assert services.get_unit(store, festival["weavers"]).photo_access_count == 1

    def test_dashboard_for_deleted_unit_goes_back_to_login(self, client, store, festival):
        services.delete_unit(store, festival["pixels"])
        res = client.get(
            "/dashboard", params={"unit_id": festival["pixels"], "credential": "PIX1"}, follow_redirects=False
        )
        assert res.status_code == 303
        assert res.headers["location"] == "/login"

    def test_dashboard_with_wrong_credential_goes_back_to_login(self, client, festival):
        res = client.get(
            "/dashboard", params={"unit_id": festival["weavers"], "credential": "MARB1"}, follow_redirects=False
        )
        assert res.status_code == 303

    def test_login_with_reserved_url_characters_in_credential(self, client, store):
        services.add_unit(store, "Ampersand Crew", credential_id="A+B&C")
        res = client.post("/login", data={"credential_id": "A+B&C"})
        assert res.status_code == 200
        assert "Ampersand Crew" in res.text
        assert "Invalid credential ID." not in res.text

    def test_blank_credential_does_not_open_unit_without_one(self, client, store):
        store.set("units", "legacy", {"name": "Legacy Unit", "events": []})
        res = client.get("/dashboard", params={"unit_id": "legacy", "credential": ""}, follow_redirects=False)
        assert res.status_code == 303
        assert res.headers["location"] == "/login"
        assert services.get_unit(store, "legacy").photo_access_count == 0


class TestAdmin:
    def test_wrong_password_is_forbidden(self, client, store):
        res = admin_post(client, "/admin/events", event_name="Music", admin_password="wrong")
        assert res.status_code == 403
        assert services.get_events(store) == []

    def test_add_and_delete_event(self, client, store, festival):
        res = admin_post(client, "/admin/events", event_name="Music")
        assert res.status_code == 303
        assert [e.name for e in services.get_events(store)] == ["Painting", "Sculpture", "Music"]
        assert services.get_unit(store, festival["marble"]).score_for("Music") == 0

        music = services.get_events(store)[-1]
        res = admin_post(client, f"/admin/events/{music.id}/delete")
        assert res.status_code == 303
        assert [e.name for e in services.get_events(store)] == ["Painting", "Sculpture"]
        persisted = store.get_one("units", festival["marble"])["events"]
        assert "Music" not in [e["name"] for e in persisted]

    def test_delete_unknown_event(self, client, festival):
        assert admin_post(client, "/admin/events/ghost/delete").status_code == 404

    def test_empty_event_name_shows_problem(self, client, store):
        res = admin_post(client, "/admin/events", event_name="  ")
        assert res.status_code == 200
        assert "There was a problem adding the event." in res.text
        assert services.get_events(store) == []

    def test_add_unit(self, client, store):
        res = admin_post(client, "/admin/units", unit_name="Kinetic Creations", theme="Art in Motion")
        assert res.status_code == 303
        [unit] = services.get_units(store)
        assert unit.name == "Kinetic Creations"
        assert unit.credential_id in client.get("/admin/units").text

    def test_delete_unit(self, client, store, festival):
        res = admin_post(client, f"/admin/units/{festival['pixels']}/delete")
        assert res.status_code == 303
        assert len(services.get_units(store)) == 2

    def test_update_score(self, client, store, festival):
        res = admin_post(client, f"/admin/scores/{festival['pixels']}", event_name="Painting", score="95")
        assert res.status_code == 303
        board = services.get_scoreboard(store)
        assert board[0].unit.id == festival["pixels"]
        assert board[0].total == 105

    def test_non_numeric_score_is_rejected(self, client, store, festival):
        res = admin_post(client, f"/admin/scores/{festival['pixels']}", event_name="Painting", score="ten")
        assert res.status_code == 200
        assert "There was a problem updating the score." in res.text
        assert services.get_unit(store, festival["pixels"]).score_for("Painting") == 0

    def test_score_for_deleted_unit(self, client, store, festival):
        services.delete_unit(store, festival["pixels"])
        res = admin_post(client, f"/admin/scores/{festival['pixels']}", event_name="Painting", score="5")
        assert "There was a problem updating the score." in res.text

    def test_gallery_admin(self, client, store, festival):
        res = admin_post(client, "/admin/gallery", src="https://img/x.jpg", alt="Statue", unit_id=festival["marble"])
        assert res.status_code == 303
        [image] = services.get_gallery_images(store)
        assert image.unit_id == festival["marble"]
        assert admin_post(client, f"/admin/gallery/{image.id}/delete").status_code == 303
        assert services.get_gallery_images(store) == []

    def test_venue_admin(self, client, store, festival):
        assert admin_post(client, "/admin/venue", room_number="12", item="Painting").status_code == 303
        [venue] = services.get_venue_details(store)
        assert admin_post(client, f"/admin/venue/{venue.id}/update", room_number="14", item="Sculpture").status_code == 303
        assert [(v.room_number, v.item) for v in services.get_venue_details(store)] == [("14", "Sculpture")]
        res = admin_post(client, "/admin/venue", room_number="", item="Painting")
        assert "There was a problem adding the venue details." in res.text
        assert admin_post(client, f"/admin/venue/{venue.id}/delete").status_code == 303
        assert services.get_venue_details(store) == []

    def test_admin_pages_render(self, client, festival):
        for url in ["/admin", "/admin/events", "/admin/units", "/admin/scores", "/admin/gallery",
                    "/admin/venue", "/admin/performance"]:
            assert client.get(url).status_code == 200, url

    def test_performance_orders_by_photo_views(self, client, store, festival):
        services.increment_photo_access_count(store, festival["pixels"])
        html = client.get("/admin/performance").text
        assert html.index("Digital Canvas Crew") < html.index("Marble Sculptors")


class TestStartup:
    def run_startup(self, settings):
        old_store, old_settings = app.state.store, app.state.settings
        app.state.store, app.state.settings = MemoryStore(), settings
        try:
            main._startup()
        finally:
            app.state.store, app.state.settings = old_store, old_settings

    def test_warns_when_admin_password_is_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="artfest.main"):
            self.run_startup(Settings(store="memory"))
        assert "ARTFEST_ADMIN_PASSWORD is not set" in caplog.text

    def test_quiet_with_custom_admin_password(self, caplog):
        with caplog.at_level(logging.WARNING, logger="artfest.main"):
            self.run_startup(Settings(store="memory", admin_password=ADMIN_PASSWORD))
        assert "ARTFEST_ADMIN_PASSWORD" not in caplog.text
