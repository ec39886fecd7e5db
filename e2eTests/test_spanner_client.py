import pytest
import requests

from scaler.domain.capacity import NodeCount, ProcessingUnits
from scaler.domain.errors import CapacityRequestError
from scaler.infra import spanner_client
from scaler.infra.spanner_client import SpannerAdminClient

KEY = "projects/p/instances/orders"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


@pytest.fixture
def patch_calls(monkeypatch):
    calls = []

    def install(response=None, error=None):
        def fake_patch(url, json=None, headers=None, timeout=None):
            calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if error:
                raise error
            return response

        monkeypatch.setattr(spanner_client.requests, "patch", fake_patch)
        return calls

    return install


def test_resize_processing_units(patch_calls):
    calls = patch_calls(FakeResponse(payload={"name": f"{KEY}/operations/abc"}))
    client = SpannerAdminClient(base_url="https://spanner.example/v1/", access_token="t0k", timeout=3)

    operation = client.resize(KEY, ProcessingUnits(2000))

    assert operation == f"{KEY}/operations/abc"
    assert calls == [{
        "url": f"https://spanner.example/v1/{KEY}",
        "json": {"instance": {"processingUnits": 2000}, "fieldMask": "processingUnits"},
        "headers": {"Content-Type": "application/json", "Authorization": "Bearer t0k"},
        "timeout": 3,
    }]


def test_resize_nodes_without_token(patch_calls):
    calls = patch_calls(FakeResponse(payload={"name": "op"}))

    SpannerAdminClient().resize(KEY, NodeCount(4))

    assert calls[0]["url"] == f"https://spanner.googleapis.com/v1/{KEY}"
    assert calls[0]["json"] == {"instance": {"nodeCount": 4}, "fieldMask": "nodeCount"}
    assert "Authorization" not in calls[0]["headers"]


@pytest.mark.parametrize("response, error", [
    (None, requests.ConnectionError("connection refused")),
    (FakeResponse(status_code=403, text="PERMISSION_DENIED"), None),
    (FakeResponse(payload={"unexpected": True}), None),
    (FakeResponse(text="<html>"), None),
])
def test_refused_resize_raises(patch_calls, response, error):
    patch_calls(response, error)
    with pytest.raises(CapacityRequestError):
        SpannerAdminClient().resize(KEY, NodeCount(4))
