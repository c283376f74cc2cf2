"""Cross-check supplied measurements against a product's required set."""

import math
from decimal import Decimal
from numbers import Real
from typing import Iterable, Sequence

from apps.common.errors import ExtraMeasurements, InvalidMeasurementValue, MissingMeasurements

# Accepted ranges in centimetres, keyed by lower-cased measurement name.
# Names not listed here only need a positive number.
_BODY_RANGE = (40, 200)
_LENGTH_RANGE = (20, 150)

RANGES_CM: dict[str, tuple[int, int]] = {
    "waist": _BODY_RANGE,
    "hip": _BODY_RANGE,
    "bust": _BODY_RANGE,
    "cintura": _BODY_RANGE,
    "quadril": _BODY_RANGE,
    "busto": _BODY_RANGE,
    "length": _LENGTH_RANGE,
    "comprimento": _LENGTH_RANGE,
}


def _key(name: str) -> str:
    return name.strip().lower()


def _is_number(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, int):
        return True
    try:
        return isinstance(value, Real) and math.isfinite(value)
    except OverflowError:
        return False


def validate_measurements(required: Sequence, supplied: Iterable) -> None:
    """Validate ``supplied`` measurements against ``required`` specs.

    Names are compared case-insensitively. Completeness is checked first
    (missing names, then extra names); values are then checked one by one in
    the order supplied and the first bad value fails the call.

    Args:
        required: Objects with a ``name`` attribute (``MeasurementSpec``).
        supplied: Objects with ``name`` and ``value`` attributes.

    Raises:
        MissingMeasurements: Required names absent from ``supplied``.
        ExtraMeasurements: Supplied names the product does not ask for, or
            names given more than once.
        InvalidMeasurementValue: A value that is not a positive number, or
            is outside the range known for that measurement.
    """
    supplied = list(supplied)
    required_keys = {_key(r.name) for r in required}
    supplied_keys = {_key(m.name) for m in supplied}

    missing = [r.name for r in required if _key(r.name) not in supplied_keys]
    if missing:
        raise MissingMeasurements(missing)

    seen = set()
    extra = []
    for m in supplied:
        # a name given twice counts as extra on its second occurrence
        if _key(m.name) not in required_keys or _key(m.name) in seen:
            extra.append(m.name)
        seen.add(_key(m.name))
    if extra:
        raise ExtraMeasurements(extra)

    for m in supplied:
        if not _is_number(m.value) or m.value <= 0:
            raise InvalidMeasurementValue(m.name, m.value, f"Measurement '{m.name}' must be a positive number")
        bounds = RANGES_CM.get(_key(m.name))
        if bounds is not None:
            low, high = bounds
            if not low <= m.value <= high:
                raise InvalidMeasurementValue(
                    m.name, m.value, f"Measurement '{m.name}' must be between {low} and {high} cm"
                )
