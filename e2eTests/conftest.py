import time
from contextlib import contextmanager
from typing import Iterator

import pytest

from scaler.domain.capacity import Capacity
from scaler.domain.capacity_requester import CapacityRequester
from scaler.domain.errors import CapacityRequestError, StateStoreError
from scaler.domain.state_store import StateTransaction
from scaler.infra.memory_state_store import InMemoryStateStore

NOW = 1_700_000_000_000
MINUTE_MS = 60_000


class FakeCapacityRequester(CapacityRequester):
    def __init__(self, fail: bool = False, delay_sec: float = 0.0):
        self.calls: list[tuple[str, Capacity]] = []
        self.fail = fail
        self.delay_sec = delay_sec

    def resize(self, instance_key: str, capacity: Capacity) -> str:
        self.calls.append((instance_key, capacity))
        if self.delay_sec:
            time.sleep(self.delay_sec)
        if self.fail:
            raise CapacityRequestError("quota exceeded")
        return f"{instance_key}/operations/op-{len(self.calls)}"


class RecordingStateStore(InMemoryStateStore):
    def __init__(self):
        super().__init__()
        self.transactions = 0

    @contextmanager
    def transaction(self, instance_key: str) -> Iterator[StateTransaction]:
        self.transactions += 1
        with super().transaction(instance_key) as tx:
            yield tx


class _BrokenWrite(StateTransaction):
    def __init__(self, inner: StateTransaction):
        self._inner = inner

    def get(self):
        return self._inner.get()

    def set(self, timestamp: int, size: int) -> None:
        raise StateStoreError("database unavailable")


class FailingWriteStateStore(InMemoryStateStore):
    @contextmanager
    def transaction(self, instance_key: str) -> Iterator[StateTransaction]:
        with super().transaction(instance_key) as tx:
            yield _BrokenWrite(tx)


@pytest.fixture
def requester() -> FakeCapacityRequester:
    return FakeCapacityRequester()


@pytest.fixture
def store() -> RecordingStateStore:
    return RecordingStateStore()
