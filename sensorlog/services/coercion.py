"""Classification of untyped incoming scalars into typed storage slots."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from sensorlog.models.enums import ValueKind

Scalar = str | int | float

INTEGER_PATTERN = re.compile(r"-?[0-9]+")
REAL_PATTERN = re.compile(r"-?[0-9]*\.?[0-9]+(?:[eE][+-]?[0-9]+)?")

# value_int is a signed 64-bit column.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True, slots=True)
class CoercedValue:
    """A reading value tagged with the storage slot it belongs in."""

    kind: ValueKind
    value: Scalar

    @property
    def value_int(self) -> int | None:
        return self.value if self.kind is ValueKind.INTEGER else None

    @property
    def value_real(self) -> float | None:
        return self.value if self.kind is ValueKind.REAL else None

    @property
    def value_str(self) -> str | None:
        return self.value if self.kind is ValueKind.TEXT else None

    def columns(self) -> dict[str, Scalar | None]:
        return {
            "value_str": self.value_str,
            "value_int": self.value_int,
            "value_real": self.value_real,
        }


def _stringify(raw: Scalar) -> str:
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer() and abs(raw) < 1e21:
        # 21.0 is spelled "21" and lands in the integer slot.
        return str(int(raw))
    return str(raw)


def coerce(raw: Scalar) -> CoercedValue:
    """Pick the integer, real or text slot for ``raw``.

    Integers are tried first, then decimal/scientific reals. Anything else,
    including numbers that do not fit the column, is kept as the original
    untrimmed text.
    """
    text = _stringify(raw)
    original = raw if isinstance(raw, str) else text
    trimmed = text.strip()

    if INTEGER_PATTERN.fullmatch(trimmed):
        parsed = int(trimmed)
        if INT64_MIN <= parsed <= INT64_MAX:
            return CoercedValue(ValueKind.INTEGER, parsed)
        return CoercedValue(ValueKind.TEXT, original)

    if REAL_PATTERN.fullmatch(trimmed):
        parsed_real = float(trimmed)
        if math.isfinite(parsed_real):
            return CoercedValue(ValueKind.REAL, parsed_real)
        return CoercedValue(ValueKind.TEXT, original)

    return CoercedValue(ValueKind.TEXT, original)


def derive_value(value_int: int | None, value_real: float | None, value_str: str | None) -> Scalar | None:
    """Rebuild a single scalar from the three typed columns, int first."""
    if value_int is not None:
        return value_int
    if value_real is not None:
        return value_real
    return value_str
