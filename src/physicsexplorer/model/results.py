"""
Calculation results.

A formula produces exactly one of three outcomes:

* `CalculationSuccess` - a number with unit, explanation and extra values,
* `DomainOutcome` - a physically valid answer that is not a number
  (total internal reflection),
* `CalculationError` - the input could not be turned into parameters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Mapping, Union


class Notation(StrEnum):
    FIXED = "fixed"
    SCIENTIFIC = "scientific"


class DomainOutcomeKind(StrEnum):
    TOTAL_INTERNAL_REFLECTION = "Total Internal Reflection"


@dataclass(frozen=True)
class Quantity:
    """A value together with how it is displayed."""
    value: float
    unit: str = ""
    decimals: int = 3
    notation: Notation = Notation.FIXED
    label: str = ""

    def formatted(self) -> str:
        """Number only, e.g. ``2.301e-28`` or ``6.000``."""
        if self.notation == Notation.SCIENTIFIC:
            return f"{self.value:.{self.decimals}e}"
        return f"{self.value:.{self.decimals}f}"

    def __str__(self) -> str:
        text = self.formatted()
        if not self.unit:
            return text
        # Degrees hug the number, everything else is spaced
        return f"{text}{self.unit}" if self.unit == "°" else f"{text} {self.unit}"


@dataclass(frozen=True)
class CalculationSuccess:
    primary: Quantity
    explanation: str = ""
    extras: Mapping[str, Quantity] = field(default_factory=dict)

    @property
    def primary_value(self) -> float:
        return self.primary.value

    @property
    def unit(self) -> str:
        return self.primary.unit

    def extra(self, name: str) -> float:
        return self.extras[name].value


@dataclass(frozen=True)
class DomainOutcome:
    kind: DomainOutcomeKind
    explanation: str = ""
    extras: Mapping[str, Quantity] = field(default_factory=dict)


@dataclass(frozen=True)
class CalculationError:
    message: str


CalculationResult = Union[CalculationSuccess, DomainOutcome, CalculationError]


def allows_simulation(result: CalculationResult | None) -> bool:
    """True for results an animation may be started from."""
    return isinstance(result, (CalculationSuccess, DomainOutcome))


def describe(result: CalculationResult) -> str:
    """One-paragraph text of a result for the result label."""
    match result:
        case CalculationSuccess(primary=primary, explanation=explanation, extras=extras):
            lines = [f"Result: {primary}"]
            lines += [f"{q.label or name}: {q}" for name, q in extras.items()]
            if explanation:
                lines.append(explanation)
            return "\n".join(lines)
        case DomainOutcome(kind=kind, explanation=explanation, extras=extras):
            lines = [f"Result: {kind}"]
            lines += [f"{q.label or name}: {q}" for name, q in extras.items()]
            if explanation:
                lines.append(explanation)
            return "\n".join(lines)
        case CalculationError(message=message):
            return f"Error: {message}"
    raise TypeError(f"Unexpected result type {type(result).__name__}")
