import pytest

from artfest import config, scoring
from artfest.config import DEFAULT_DB_PATH, load_settings


def test_defaults(monkeypatch):
    for name in ["ARTFEST_STORE", "ARTFEST_DB_PATH", "ARTFEST_ADMIN_PASSWORD", "ARTFEST_RANK_TIE_BREAK",
                 "ARTFEST_KEEP_ORPHAN_SCORES", "ARTFEST_MAX_TXN_RETRIES", "ARTFEST_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    s = load_settings()
    assert (s.store, s.db_path, s.rank_tie_break, s.keep_orphan_scores, s.max_txn_retries, s.log_level) == (
        "sqlite", DEFAULT_DB_PATH, "stable", False, 25, "INFO"
    )


def test_overrides(monkeypatch):
    monkeypatch.setenv("ARTFEST_STORE", "Memory")
    monkeypatch.setenv("ARTFEST_RANK_TIE_BREAK", "name")
    monkeypatch.setenv("ARTFEST_KEEP_ORPHAN_SCORES", "yes")
    monkeypatch.setenv("ARTFEST_MAX_TXN_RETRIES", "5")
    monkeypatch.setenv("ARTFEST_LOG_LEVEL", "debug")
    s = load_settings()
    assert (s.store, s.rank_tie_break, s.keep_orphan_scores, s.max_txn_retries, s.log_level) == (
        "memory", "name", True, 5, "DEBUG"
    )


@pytest.mark.parametrize("name, value", [
    ("ARTFEST_STORE", "postgres"),
    ("ARTFEST_RANK_TIE_BREAK", "coin-flip"),
    ("ARTFEST_KEEP_ORPHAN_SCORES", "maybe"),
    ("ARTFEST_MAX_TXN_RETRIES", "lots"),
    ("ARTFEST_MAX_TXN_RETRIES", "0"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()


def test_tie_break_choices_come_from_scoring():
    assert config.TIE_BREAKS is scoring.TIE_BREAKS
