"""Tests for the service entry point and its startup/shutdown hook."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

import app as app_module
from app import app_factory, build_app
from config import Config


def test_lifespan_opens_storage_and_serves_requests(tmp_path):
    config = Config(
        database_url=f"sqlite:///{tmp_path}/app.sqlite3",
        base_url="http://testserver",
        code_max_attempts=5,
        log_level="DEBUG",
    )
    app = build_app(config)

    with TestClient(app) as client:
        assert app.state.ledger.backend_name == "sqlite"
        assert app.state.service.allocator.max_attempts == 5

        created = client.post("/api/links", json={"url": "https://example.com/a"})
        assert created.status_code == 201
        code = created.json()["code"]

        redirect = client.get(f"/{code}", follow_redirects=False)
        assert redirect.status_code == 302
        assert redirect.headers["location"] == "https://example.com/a"

        assert client.get(f"/api/links/{code}").json()["clickCount"] == 1
        assert client.get("/healthz").json() == {"ok": True, "version": "1.0"}


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/links")
    monkeypatch.setenv("CODE_MAX_ATTEMPTS", "7")
    monkeypatch.setenv("LOG_JSON", "true")

    config = Config()

    assert config.database_url == "postgresql://u:p@db:5432/links"
    assert config.code_max_attempts == 7
    assert config.log_json is True
    assert config.port == 4000


def test_multiple_workers_run_through_factory(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path}/workers.sqlite3")
    monkeypatch.setenv("WORKERS", "3")
    monkeypatch.setenv("PORT", "4123")
    calls = []
    monkeypatch.setattr(app_module.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

    app_module.main()

    assert len(calls) == 1
    target, kwargs = calls[0]
    assert target == "app:app_factory"
    assert kwargs["factory"] is True
    assert kwargs["workers"] == 3
    assert kwargs["port"] == 4123

    assert isinstance(app_factory(), FastAPI)
