import base64
import json

import pytest

from conftest import NOW, FakeCapacityRequester
from scaler.core.scaling_decision_service import DecisionOutcome, ScalingDecisionService
from scaler.domain.errors import MalformedRequestError, ScalingFailedError
from scaler.infra.http_adapter import create_app
from scaler.infra.memory_state_store import InMemoryStateStore
from scaler.infra.message_adapter import decode_message_data, handle_message

REQUEST = {
    "projectId": "p",
    "instanceId": "orders",
    "currentSize": 1000,
    "units": "PROCESSING_UNITS",
    "maxSize": 5000,
    "metrics": [{"name": "high_priority_cpu", "value": 80}],
    "scalingMethod": "DIRECT",
}


def encode(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def build_service(fail: bool = False) -> ScalingDecisionService:
    return ScalingDecisionService(
        state_store=InMemoryStateStore(),
        capacity_requester=FakeCapacityRequester(fail=fail),
        clock=lambda: NOW,
    )


@pytest.fixture
def client():
    return create_app(build_service()).test_client()


# -----------------------------------------------------------------------------
# HTTP ------------------------------------------------------------------------
# -----------------------------------------------------------------------------

def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_scale_endpoint_returns_decision(client):
    r = client.post("/scale", json=REQUEST)

    assert r.status_code == 200
    body = r.get_json()
    assert body["outcome"] == "DONE"
    assert body["suggestedSize"] == 2000


def test_cooldown_block_is_not_an_error(client):
    client.post("/scale", json=REQUEST)
    r = client.post("/scale", json={**REQUEST, "currentSize": 2000})

    assert r.status_code == 200
    assert r.get_json()["outcome"] == "COOLDOWN_BLOCKED"


@pytest.mark.parametrize("body", [{"instanceId": "orders"}, [1, 2]])
def test_scale_endpoint_rejects_malformed_request(client, body):
    r = client.post("/scale", json=body)
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_scale_endpoint_rejects_non_json(client):
    r = client.post("/scale", data="not json", content_type="text/plain")
    assert r.status_code == 400


def test_scale_endpoint_rejects_non_finite_numbers(client):
    body = json.dumps({**REQUEST, "metrics": [{"name": "high_priority_cpu", "value": float("inf")}]})
    assert "Infinity" in body

    r = client.post("/scale", data=body, content_type="application/json")

    assert r.status_code == 400


def test_scale_endpoint_reports_failed_decision():
    client = create_app(build_service(fail=True)).test_client()

    r = client.post("/scale", json=REQUEST)

    assert r.status_code == 500
    assert r.get_json()["outcome"] == "FAILED"


def test_pubsub_push_envelope(client):
    r = client.post("/pubsub", json={"message": {"data": encode(REQUEST)}})

    assert r.status_code == 200
    assert r.get_json()["outcome"] == "DONE"


@pytest.mark.parametrize("envelope", [{}, {"message": {}}, {"message": {"data": "%%%"}}])
def test_pubsub_rejects_bad_envelope(client, envelope):
    assert client.post("/pubsub", json=envelope).status_code == 400


def test_pubsub_failure_is_reported_for_redelivery():
    client = create_app(build_service(fail=True)).test_client()

    r = client.post("/pubsub", json={"message": {"data": encode(REQUEST)}})

    assert r.status_code == 500


# -----------------------------------------------------------------------------
# Message handler -------------------------------------------------------------
# -----------------------------------------------------------------------------

def test_handle_message_returns_decision():
    decision = handle_message(build_service(), encode(REQUEST))
    assert decision.outcome is DecisionOutcome.DONE


def test_handle_message_raises_on_failed_decision():
    with pytest.raises(ScalingFailedError, match="projects/p/instances/orders"):
        handle_message(build_service(fail=True), encode(REQUEST))


@pytest.mark.parametrize("data", ["not base64!", base64.b64encode(b"{broken").decode("ascii")])
def test_decode_rejects_garbage(data):
    with pytest.raises(MalformedRequestError):
        decode_message_data(data)
