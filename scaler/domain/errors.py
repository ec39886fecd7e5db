class MalformedRequestError(ValueError):
    """Scaling request is missing required fields or carries invalid values."""


class CapacityRequestError(RuntimeError):
    """The control plane did not accept a capacity change."""


class StateStoreError(RuntimeError):
    """Reading or writing autoscaler state failed at the storage layer."""


class ScalingFailedError(RuntimeError):
    """A decision reached the FAILED outcome; raised by transport adapters."""
