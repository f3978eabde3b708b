"""Startup-time configuration faults.

These are raised while the application is being assembled and are fatal:
they are never turned into per-request responses.
"""


class RouteConfigurationError(Exception):
    """A controller's route table cannot be bound.

    Raised for malformed path patterns, handlers that are not methods of the
    controller class, invalid upload specs and duplicate method/path pairs.
    """

    def __init__(self, message: str, *, controller: str | None = None) -> None:
        if controller:
            message = f"{controller}: {message}"
        super().__init__(message)
        self.controller = controller


class ContainerError(LookupError):
    """Requested name is not registered in the container."""
