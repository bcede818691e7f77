"""
Core bridge exceptions.

These exceptions are transport-agnostic. Inbound calls that cannot be
routed are dropped rather than raised; only misuse of the API surfaces here.
"""


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    pass


class ProgrammingError(BridgeError):
    """Raised when the bus is used in a way that can never succeed."""

    pass


class RegistrationError(ProgrammingError):
    """Raised when a module cannot be registered with the bus."""

    def __init__(self, key: str | None, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot register module {key!r}: {reason}")


class AuthorizationError(BridgeError):
    """Raised when an event is fired without its dispatch key."""

    def __init__(self, event_key: str):
        self.event_key = event_key
        super().__init__(f"Dispatch key does not match event: {event_key}")


class AnnotationError(ProgrammingError):
    """Raised when an api parameter's type annotation cannot be resolved."""

    def __init__(self, method: str, parameter: str, annotation: str):
        self.method = method
        self.parameter = parameter
        self.annotation = annotation
        super().__init__(f"Cannot resolve annotation {annotation!r} of parameter {parameter!r} in {method}")
