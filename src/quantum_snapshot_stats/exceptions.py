"""Custom exception hierarchy for the snapshot statistics engine.

Every error raised by this package derives from :class:`SnapshotStatsError`
so callers can catch engine, configuration and backend failures with a single
handler while still being able to tell them apart.
"""

from typing import Any, Optional


class SnapshotStatsError(Exception):
    """Base exception for all snapshot statistics errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Engine Errors
# =============================================================================


class EngineError(SnapshotStatsError):
    """Base class for errors raised while accumulating snapshot statistics."""

    pass


class DimensionMismatchError(EngineError):
    """Raised when two vectors that must agree in length do not.

    Examples:
        - A target state has a different size from the snapshot state
        - A snapshot contributes a vector whose shape differs from the
          statistics already accumulated under the same key
    """

    def __init__(self, expected: int, actual: int, context: str = "target_state"):
        self.expected = expected
        self.actual = actual
        self.context = context
        super().__init__(
            f"{context} vector size \"{actual}\" should be \"{expected}\"",
            details={"expected": expected, "actual": actual, "context": context},
        )


class InvalidStateError(EngineError):
    """Raised when a state vector cannot be interpreted as a register of qudits."""

    def __init__(self, size: int, qudit_dim: int, reason: str):
        self.size = size
        self.qudit_dim = qudit_dim
        super().__init__(
            f"Invalid state vector of size {size} (qudit_dim={qudit_dim}): {reason}",
            details={"size": size, "qudit_dim": qudit_dim, "reason": reason},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SnapshotStatsError):
    """Base class for configuration errors."""

    pass


class InvalidOptionError(ConfigurationError):
    """Raised when a recognised configuration option has an unusable value."""

    def __init__(self, option: str, value: Any, reason: str):
        self.option = option
        self.value = value
        super().__init__(
            f"Invalid option '{option}' = {value!r}: {reason}",
            details={"option": option, "value": repr(value), "reason": reason},
        )


# =============================================================================
# Backend Errors
# =============================================================================


class BackendError(SnapshotStatsError):
    """Base class for simulation backend errors."""

    pass


class UnsupportedInstructionError(BackendError):
    """Raised when the statevector backend meets an instruction it cannot apply.

    Examples:
        - Classically conditioned gates
        - Non-unitary instructions other than measure, reset and barrier
    """

    def __init__(self, name: str, reason: Optional[str] = None):
        self.name = name
        details = {"instruction": name}
        msg = f"Unsupported instruction '{name}'"
        if reason:
            details["reason"] = reason
            msg += f": {reason}"
        super().__init__(msg, details=details)
