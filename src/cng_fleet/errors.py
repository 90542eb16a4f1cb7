"""Error taxonomy for the calculator engine.

Two kinds of failure are signalled to callers:

  - ``InvalidConfigurationError`` — inputs that make the computation meaningless
    (non-positive horizon, negative counts, too many manual rows, …).
  - ``UnreachableStateError``     — a closed-set value (strategy, station type,
    business type) outside its set.

Degenerate results (e.g. zero investment) are not errors: the affected result
fields are reported as ``None``.
"""

from __future__ import annotations


class CalculatorError(Exception):
    """Base class for every error raised by the engine."""

    kind: str = "calculator_error"


class InvalidConfigurationError(CalculatorError, ValueError):
    """Inputs rejected before any computation takes place."""

    kind = "invalid_configuration"


class UnreachableStateError(CalculatorError):
    """A closed-set value fell outside its set."""

    kind = "unreachable_state"

    def __init__(self, what: str, value: object, allowed: tuple[str, ...] | list[str]) -> None:
        self.what = what
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown {what} {value!r}; expected one of {', '.join(self.allowed)}"
        )
