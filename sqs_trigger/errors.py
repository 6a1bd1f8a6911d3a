class ConfigurationError(Exception):
    """Trigger cannot start (bad interval, unknown unit, delay too large)."""

class ValidationError(Exception):
    """A receive option is out of range; the current cycle is skipped."""

class TransportError(Exception):
    """The queue service call failed (network, auth, remote error)."""
