class SessionError(Exception):
    """Base exception for the focus session engine."""


class SessionConfigurationError(SessionError):
    """Raised when engine configuration values are out of range."""
