"""Core types for automodel - Result type, complexity tiers and model references.

This module provides:
- Result[T, E]: A generic type for handling expected failures without exceptions
- ComplexityTier: The canonical, totally ordered set of complexity buckets
- ModelRef: A ``provider/model`` identifier split for the host
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, cast

from automodel.core.errors import ValidationError

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Result(Generic[T, E]):
    """A type that represents either success (Ok) or failure (Err).

    Result is used for expected failures (an invalid configuration document,
    a missing file during reload) instead of exceptions. Exceptions are
    reserved for programming errors and for the load-time API, which raises
    ConfigError directly.

    Usage:
        ok_result: Result[int, str] = Result.ok(42)
        err_result: Result[int, str] = Result.err("something went wrong")

        if result.is_ok:
            process(result.value)
        else:
            handle_error(result.error)
    """

    _value: T | None
    _error: E | None
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> Result[T, E]:
        """Create a successful Result containing the given value."""
        return cls(_value=value, _error=None, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> Result[T, E]:
        """Create a failed Result containing the given error."""
        return cls(_value=None, _error=error, _is_ok=False)

    @property
    def is_ok(self) -> bool:
        """Return True if this Result is Ok (success)."""
        return self._is_ok

    @property
    def is_err(self) -> bool:
        """Return True if this Result is Err (failure)."""
        return not self._is_ok

    def __repr__(self) -> str:
        if self._is_ok:
            return f"Ok({self._value!r})"
        return f"Err({self._error!r})"

    @property
    def value(self) -> T:
        """Return the Ok value.

        Note: Only access this when is_ok is True.
        For safe access, use unwrap() or unwrap_or().
        """
        if not self._is_ok:
            msg = "Cannot access value on Err result"
            raise ValueError(msg)
        return cast(T, self._value)

    @property
    def error(self) -> E:
        """Return the Err value.

        Note: Only access this when is_err is True.
        """
        if self._is_ok:
            msg = "Cannot access error on Ok result"
            raise ValueError(msg)
        return cast(E, self._error)

    def unwrap(self) -> T:
        """Return the Ok value or raise ValueError if Err."""
        if self._is_ok:
            return cast(T, self._value)
        raise ValueError(str(self._error))

    def unwrap_or(self, default: T) -> T:
        """Return the Ok value or the provided default if Err."""
        if self._is_ok:
            return cast(T, self._value)
        return default

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        """Transform the Ok value using the given function."""
        if self._is_ok:
            return Result.ok(fn(cast(T, self._value)))
        return Result.err(cast(E, self._error))


class ComplexityTier(str, Enum):
    """Ordered complexity buckets.

    Declaration order is the canonical rank: simple < medium < complex < advanced.
    The context adjuster moves along this order one step at a time, and every
    move is clamped to the ends.
    """

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        """Zero-based position in the canonical order."""
        return _TIER_ORDER.index(self)

    @classmethod
    def ordered(cls) -> tuple[ComplexityTier, ...]:
        """All tiers, lowest first."""
        return _TIER_ORDER

    @classmethod
    def minimum(cls) -> ComplexityTier:
        return _TIER_ORDER[0]

    @classmethod
    def maximum(cls) -> ComplexityTier:
        return _TIER_ORDER[-1]

    @property
    def is_minimum(self) -> bool:
        return self is _TIER_ORDER[0]

    @property
    def is_maximum(self) -> bool:
        return self is _TIER_ORDER[-1]

    def lower(self) -> ComplexityTier:
        """Return the tier one step below, or self at the minimum."""
        return _TIER_ORDER[max(0, self.rank - 1)]

    def raise_(self) -> ComplexityTier:
        """Return the tier one step above, or self at the maximum."""
        return _TIER_ORDER[min(len(_TIER_ORDER) - 1, self.rank + 1)]

    def at_least(self, floor: ComplexityTier) -> ComplexityTier:
        """Return whichever of self and floor ranks higher."""
        return self if self.rank >= floor.rank else floor


_TIER_ORDER: tuple[ComplexityTier, ...] = tuple(ComplexityTier)


@dataclass(frozen=True, slots=True)
class ModelRef:
    """A model identifier split into provider and model parts.

    The engine treats identifiers as opaque ``provider/model`` strings. The
    split happens only when handing the identifier back to a host that wants
    separate provider and model IDs. Everything after the first ``/`` belongs
    to the model, so ``openrouter/google/gemini-2.0-flash`` keeps its nested
    path.
    """

    provider: str
    model: str

    @classmethod
    def parse(cls, identifier: str) -> ModelRef:
        """Split a ``provider/model`` identifier.

        Raises:
            ValidationError: If the identifier has no provider or model part.
        """
        provider, sep, model = identifier.partition("/")
        if not sep or not provider or not model:
            raise ValidationError(
                "Model identifier must have the form 'provider/model'",
                field="model",
                value=identifier,
            )
        return cls(provider=provider, model=model)

    def __str__(self) -> str:
        return f"{self.provider}/{self.model}"

    def to_host(self) -> dict[str, str]:
        """Return the ``providerID`` / ``modelID`` mapping hosts expect."""
        return {"providerID": self.provider, "modelID": self.model}


# Type aliases for common domain types
ModelId = str
"""Type alias for an opaque ``provider/model`` identifier."""

TaskType = str
"""Type alias for a configured task type name (e.g. "coding-simple")."""

StrategyName = str
"""Type alias for a configured strategy name (e.g. "cost-optimized")."""

HostPayload = dict[str, Any]
"""Type alias for the loosely-typed argument dict a host hands to the engine."""
