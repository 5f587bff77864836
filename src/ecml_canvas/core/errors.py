"""ECML and plugin lifecycle exceptions."""


class ECMLError(Exception):
    """Base class for ECML marshalling errors."""


class ECMLDecodeError(ECMLError):
    """Raised in strict mode when a JSON text block cannot be decoded."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Cannot decode ECML field '{field}': {message}")
        self.field = field


class PluginNotRegisteredError(KeyError):
    """Raised when a session is asked to instantiate an unknown plugin type."""
