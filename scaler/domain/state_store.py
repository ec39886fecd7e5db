from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from scaler.domain.autoscalerState import AutoscalerState


class StateTransaction(ABC):
    """Handle on one instance's state, valid while its transaction is open."""

    @abstractmethod
    def get(self) -> AutoscalerState:
        pass

    @abstractmethod
    def set(self, timestamp: int, size: int) -> None:
        pass


class StateStore(ABC):
    @abstractmethod
    def transaction(self, instance_key: str) -> AbstractContextManager[StateTransaction]:
        """
        Opens a transaction that holds the instance's single-writer lock until
        the context exits. Concurrent decisions for the same instance queue
        here, decisions for other instances do not.
        """

    def get(self, instance_key: str) -> AutoscalerState:
        with self.transaction(instance_key) as tx:
            return tx.get()

    def set(self, instance_key: str, timestamp: int, size: int) -> None:
        with self.transaction(instance_key) as tx:
            tx.set(timestamp, size)
