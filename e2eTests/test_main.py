import json

import pytest

from scaler.config import ScalerSettings
from scaler.infra import spanner_client
from scaler.infra.memory_state_store import InMemoryStateStore
from scaler.infra.sql_state_store import SqlStateStore
from scaler.main import build_state_store, main

REQUEST = {
    "projectId": "p",
    "instanceId": "orders",
    "currentSize": 2,
    "units": "NODES",
    "metrics": [{"name": "high_priority_cpu", "value": 85}],
}


class AcceptedResponse:
    text = ""

    def raise_for_status(self):
        pass

    def json(self):
        return {"name": "projects/p/instances/orders/operations/1"}


def test_settings_defaults():
    settings = ScalerSettings.from_env({})
    assert settings == ScalerSettings()
    assert settings.state_backend == "sql"
    assert settings.http_port == 8080


def test_settings_from_env():
    settings = ScalerSettings.from_env({
        "SCALER_STATE_BACKEND": "MEMORY",
        "SCALER_HTTP_PORT": "9000",
        "SPANNER_ACCESS_TOKEN": "secret",
        "SPANNER_REQUEST_TIMEOUT_SEC": "2.5",
        "SCALER_LOG_LEVEL": "debug",
    })
    assert settings.state_backend == "memory"
    assert settings.http_port == 9000
    assert settings.spanner_access_token == "secret"
    assert settings.spanner_request_timeout_sec == 2.5
    assert settings.log_level == "DEBUG"


def test_settings_reject_unknown_backend():
    with pytest.raises(ValueError):
        ScalerSettings.from_env({"SCALER_STATE_BACKEND": "redis"})


def test_build_state_store(tmp_path):
    assert isinstance(build_state_store(ScalerSettings(state_backend="memory")), InMemoryStateStore)

    store = build_state_store(ScalerSettings(database_url=f"sqlite:///{tmp_path / 'state.db'}"))
    assert isinstance(store, SqlStateStore)
    assert store.get("projects/p/instances/orders").never_scaled


def test_process_command(tmp_path, monkeypatch, capsys):
    path = tmp_path / "request.json"
    path.write_text(json.dumps(REQUEST))
    monkeypatch.setenv("SCALER_STATE_BACKEND", "memory")
    monkeypatch.setattr(spanner_client.requests, "patch", lambda *a, **kw: AcceptedResponse())

    assert main(["process", str(path)]) == 0

    decision = json.loads(capsys.readouterr().out)
    assert decision["outcome"] == "DONE"
    assert decision["suggestedSize"] == 3


def test_process_command_with_unreadable_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SCALER_STATE_BACKEND", "memory")
    assert main(["process", str(tmp_path / "missing.json")]) == 2
