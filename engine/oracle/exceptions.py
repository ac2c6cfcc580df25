class OracleError(Exception):
    """Base class for anomaly oracle errors."""


class OracleUnavailableError(OracleError):
    """Raised when the oracle backend is missing or failed to load."""


class OracleTimeoutError(OracleError):
    """Raised when an inference call exceeds its timeout."""


class OracleOutputError(OracleError):
    """Raised when the oracle returns empty or non-finite output."""
