"""Service errors shared by the store, the services and the API layer."""


class ServiceError(Exception):
    """Base class for failures surfaced to API clients."""

    def __init__(self, message: str = "Internal error"):
        self.message = message
        super().__init__(self.message)


class StoreUnavailable(ServiceError):
    """The key-value store could not be reached or failed an operation."""

    def __init__(self, message: str = "Store unavailable"):
        super().__init__(message)


class InvalidArgument(ServiceError):
    """A request carried a missing or malformed value."""

    def __init__(self, message: str = "Invalid argument"):
        super().__init__(message)
