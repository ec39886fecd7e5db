from abc import ABC, abstractmethod

from scaler.domain.capacity import Capacity


class CapacityRequester(ABC):
    @abstractmethod
    def resize(self, instance_key: str, capacity: Capacity) -> str:
        """
        Asks the control plane to change the instance capacity.

        Returns once the request is accepted (not completed) and gives back the
        operation name. Raises CapacityRequestError when the request is refused.
        """
