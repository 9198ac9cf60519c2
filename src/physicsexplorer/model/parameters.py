"""
Parameter Specifications
========================
Static, per-topic description of the input form and of the rules the raw
input has to satisfy before any formula is evaluated.

Why is this file needed?
------------------------
1. Single source of truth: the validator, the form builder in the window and
   the tests all read the same `ParameterSpec`.
2. Defaults: optional fields declare their default here, so the formulas
   never have to guess what an empty input means.

Classes:
    NumericField: One numeric input with its per-field constraints.
    ChoiceField: The mode selector of topics with several variants.
    CrossFieldRule: A rule that relates several parsed values.
    ParameterSpec: Ordered fields plus cross-field rules.
    ParameterSet: The immutable, validated result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional


@dataclass(frozen=True)
class NumericField:
    """
    A single numeric input.

    ``required=False`` fields may be left blank; the validator then uses
    ``default`` or, when there is none, leaves the field out of the set.
    ``minimum``/``maximum`` are inclusive. ``zero_is_blank`` fields treat an
    entered 0 the same as a blank entry.
    """
    name: str
    label: str
    unit: str = ""
    required: bool = True
    default: Optional[float] = None
    nonzero: bool = False
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    placeholder: str = ""
    zero_is_blank: bool = False

    @property
    def display_label(self) -> str:
        return f"{self.label} ({self.unit})" if self.unit else self.label


@dataclass(frozen=True)
class ChoiceField:
    """Mode selector (capacitor type, optic type, ...)."""
    name: str
    label: str
    options: tuple[tuple[str, str], ...]  # (value, display text)
    default: Optional[str] = None

    def values(self) -> list[str]:
        return [value for value, _ in self.options]

    def text_for(self, value: str) -> str:
        for key, text in self.options:
            if key == value:
                return text
        raise KeyError(f"'{value}' is not an option of {self.name}")


@dataclass(frozen=True)
class CrossFieldRule:
    """
    Relation between parsed values, e.g. "outer radius > inner radius".

    The predicate receives the parsed values (defaults already applied) and
    returns True when the rule holds.
    """
    description: str
    predicate: Callable[[Mapping[str, float]], bool]
    field: Optional[str] = None


@dataclass(frozen=True)
class ParameterSpec:
    fields: tuple[NumericField, ...]
    rules: tuple[CrossFieldRule, ...] = ()

    def __iter__(self) -> Iterator[NumericField]:
        return iter(self.fields)

    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> NumericField:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"No field named '{name}'")


@dataclass(frozen=True)
class ParameterSet:
    """
    Validated parameters of one topic.

    Immutable: a changed input produces a new set, it never patches this one.
    """
    topic: str
    values: Mapping[str, float] = field(default_factory=dict)
    variant: Optional[str] = None

    def __post_init__(self) -> None:
        # Copy, then freeze, so the caller's dict can't leak mutations in
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name: str) -> float:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return self.values.get(name, default)

    def as_dict(self) -> dict[str, float]:
        return dict(self.values)
