"""
Parameter Validator
===================
Turns the raw text of a topic form into a `ParameterSet`.

Order of checks:
1. The mode selector (if the topic has one) must name a known variant.
2. Each field is parsed on its own: blank required fields raise
   `MissingField`, unparsable or non-finite text raises `NotANumber`,
   blank optional fields take their declared default, as does 0 in a field
   where zero means "not fitted".
3. Per-field constraints (nonzero, inclusive range) raise
   `ConstraintViolation`.
4. Cross-field rules run last, on the fully parsed values.

The function is pure: it reads the registry and the given mapping only.
"""
from __future__ import annotations

import logging
import math
from typing import Mapping

from physicsexplorer.model.errors import ConstraintViolation, MissingField, NotANumber
from physicsexplorer.model.parameters import NumericField, ParameterSet, ParameterSpec
from physicsexplorer.model.topics import TopicDefinition, get_topic

logger = logging.getLogger(__name__)


def parse_number(field: NumericField, raw: str | None) -> float | None:
    """
    Parse one raw value.

    Returns None for a blank optional field without a default. An entered 0
    counts as blank in ``zero_is_blank`` fields.
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        if field.required:
            raise MissingField(field.name, field.label)
        return field.default

    try:
        value = float(text)
    except ValueError:
        raise NotANumber(field.name, text, field.label) from None
    if not math.isfinite(value):
        raise NotANumber(field.name, text, field.label)
    if value == 0 and field.zero_is_blank:
        return field.default
    return value


def check_field(field: NumericField, value: float) -> None:
    if field.nonzero and value == 0:
        raise ConstraintViolation(f"{field.label} cannot be zero.", field.name)
    if field.minimum is not None and value < field.minimum:
        raise ConstraintViolation(_range_message(field), field.name)
    if field.maximum is not None and value > field.maximum:
        raise ConstraintViolation(_range_message(field), field.name)


def _range_message(field: NumericField) -> str:
    unit = field.unit if field.unit == "°" else f" {field.unit}" if field.unit else ""
    low = "-∞" if field.minimum is None else f"{field.minimum:g}{unit}"
    high = "∞" if field.maximum is None else f"{field.maximum:g}{unit}"
    return f"{field.label} must be between {low} and {high}."


def resolve_variant(topic: TopicDefinition, raw_fields: Mapping[str, str]) -> str | None:
    selector = topic.selector
    if selector is None:
        return None
    choice = str(raw_fields.get(selector.name) or "").strip() or selector.default
    if not choice:
        raise MissingField(selector.name, selector.label)
    if choice not in topic.specs:
        raise ConstraintViolation(
            f"'{choice}' is not a valid {selector.label.lower()}; "
            f"choose one of: {', '.join(selector.values())}.",
            selector.name,
        )
    return choice


def validate_spec(spec: ParameterSpec, raw_fields: Mapping[str, str]) -> dict[str, float]:
    values: dict[str, float] = {}
    for field in spec:
        value = parse_number(field, raw_fields.get(field.name))
        if value is None:
            continue
        check_field(field, value)
        values[field.name] = value

    for rule in spec.rules:
        if not rule.predicate(values):
            raise ConstraintViolation(rule.description, rule.field)
    return values


def validate(topic: str | TopicDefinition, raw_fields: Mapping[str, str]) -> ParameterSet:
    """
    Validate the raw form of ``topic``.

    Args:
        topic: Topic key (or an already looked-up definition).
        raw_fields: Field name to raw text; the selector is a field too.

    Returns:
        The immutable parameter set.

    Raises:
        ValidationError: One of `MissingField`, `NotANumber` or
            `ConstraintViolation`.
        KeyError: Unknown topic key.
    """
    definition = get_topic(topic) if isinstance(topic, str) else topic
    variant = resolve_variant(definition, raw_fields)
    values = validate_spec(definition.spec_for(variant), raw_fields)
    logger.debug(f"Validated {definition.key} ({variant or 'default'}): {values}")
    return ParameterSet(topic=definition.key, values=values, variant=variant)
