from contextlib import contextmanager
from typing import Iterator

from scaler.domain.autoscalerState import AutoscalerState
from scaler.domain.state_store import StateStore, StateTransaction
from scaler.infra.keyed_locks import KeyedLocks


class _MemoryTransaction(StateTransaction):
    def __init__(self, records: dict[str, AutoscalerState], instance_key: str) -> None:
        self._records = records
        self._key = instance_key

    def get(self) -> AutoscalerState:
        return self._records.get(self._key, AutoscalerState())

    def set(self, timestamp: int, size: int) -> None:
        self._records[self._key] = AutoscalerState(last_scaling_timestamp=timestamp, current_size=size)


class InMemoryStateStore(StateStore):
    """Process-local store for local runs and tests; state is lost on exit."""

    def __init__(self) -> None:
        self._records: dict[str, AutoscalerState] = {}
        self._locks = KeyedLocks()

    @contextmanager
    def transaction(self, instance_key: str) -> Iterator[StateTransaction]:
        with self._locks.hold(instance_key):
            yield _MemoryTransaction(self._records, instance_key)
