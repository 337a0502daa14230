import logging

from app.core.config import Settings


def test_unknown_backend_warns_once(monkeypatch, caplog):
    monkeypatch.setenv("STORAGE_BACKEND", "Supabase")

    with caplog.at_level(logging.WARNING, logger="app.core.config"):
        settings = Settings()
        backends = {settings.backend for _ in range(5)}

    assert backends == {"local"}
    assert settings.STORAGE_BACKEND == "supabase"
    avisos = [r for r in caplog.records if "desconhecido" in r.getMessage()]
    assert len(avisos) == 1


def test_known_backend_does_not_warn(monkeypatch, caplog):
    monkeypatch.setenv("STORAGE_BACKEND", "LOCAL")

    with caplog.at_level(logging.WARNING, logger="app.core.config"):
        settings = Settings()

    assert settings.backend == "local"
    assert [r for r in caplog.records if r.name == "app.core.config"] == []


def test_local_backup_flag(monkeypatch):
    monkeypatch.setenv("LOCAL_BACKUP", "nao")
    assert Settings().LOCAL_BACKUP is False

    monkeypatch.setenv("LOCAL_BACKUP", "sim")
    assert Settings().LOCAL_BACKUP is True
