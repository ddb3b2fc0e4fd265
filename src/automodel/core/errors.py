"""Error hierarchy for automodel.

Exception Hierarchy:
    AutoModelError (base)
    ├── ConfigError       - Configuration documents and snapshot issues
    └── ValidationError   - Invalid values handed to the engine's helpers

Classification itself never raises: every anomaly in a prompt or request is
absorbed into a default and reported through the reasoning trace. These
exceptions surface only at configuration load time and from the small helper
APIs that parse host-supplied values.
"""

from typing import Any


class AutoModelError(Exception):
    """Base exception for all automodel errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigError(AutoModelError):
    """Error from configuration operations.

    Raised when a configuration document cannot be found, parsed, or fails
    schema validation. A configuration that raises this never becomes the
    active snapshot.

    Attributes:
        config_key: The configuration key that caused the error.
        config_file: Path to the config file if applicable.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        config_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config error.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            config_file: Path to the config file if applicable.
            details: Optional dict with additional context.
        """
        super().__init__(message, details)
        self.config_key = config_key
        self.config_file = config_file


class ValidationError(AutoModelError):
    """Error from data validation operations.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value

    @property
    def safe_value(self) -> str:
        """Return a loggable representation of the value.

        Long strings are truncated and non-string values are reduced to their
        type name, so prompts and payloads never end up verbatim in logs.
        """
        if self.value is None:
            return "<None>"
        if isinstance(self.value, str):
            if len(self.value) > 50:
                return f"{self.value[:20]}...({len(self.value)} chars)"
            return repr(self.value)
        return f"<{type(self.value).__name__}>"

    def __str__(self) -> str:
        base = self.message
        if self.field:
            base = f"{base} (field: {self.field}, value: {self.safe_value})"
        if self.details:
            base = f"{base} (details: {self.details})"
        return base
