"""Line protocol encoder for measurements.

Renders a Measurement as ``<table>,<tags> <fields> <timestamp>``.

Escaping is deliberately minimal: only spaces in tag values are escaped.
Commas or equals signs in tag values, and double quotes in string field
values, are written as-is and will corrupt the line.
"""

import re
from collections.abc import Iterable

from upstelemetry.core.models import Field, Measurement, Tag

_ESCAPED_SPACE = "\\ "

# Unicode White_Space; str.strip() would also remove \x1c-\x1f
_WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# ASCII digits only; int() alone would also accept "1_000" and non-ASCII digits
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _parse_int64(text: str) -> int | None:
    """Parse a base-10 signed 64-bit integer, or return None."""
    if not _INTEGER_RE.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def encode_tag(tag: Tag) -> str:
    """Encode a tag as ``key=value`` with spaces in the value escaped."""
    return f"{tag.key}={tag.value.replace(' ', _ESCAPED_SPACE)}"


def encode_field(field: Field) -> str:
    """Encode a field, inferring integer type from its value.

    Values that trim to a 64-bit integer render as ``key=<digits>i``.
    Everything else, floats included, renders as ``key="<value>"`` using
    the original untrimmed value.
    """
    trimmed = field.value.strip(_WHITESPACE)
    if _parse_int64(trimmed) is not None:
        return f"{field.key}={trimmed}i"
    return f'{field.key}="{field.value}"'


def encode_measurement(measurement: Measurement) -> str:
    """Encode a measurement as a single line with no trailing newline.

    The comma after the table name is always written, so a measurement
    without tags encodes as ``table, field=1i 1700000000000``.

    Args:
        measurement: The measurement to encode.

    Returns:
        The line protocol string.
    """
    tag_set = ",".join(encode_tag(tag) for tag in measurement.tags)
    field_set = ",".join(encode_field(field) for field in measurement.fields)
    return f"{measurement.table},{tag_set} {field_set} {measurement.timestamp}"


def encode_measurements(measurements: Iterable[Measurement]) -> str:
    """Encode several measurements, one per line.

    Returns:
        Newline-joined lines without a trailing newline.
        Empty string if no measurements.
    """
    return "\n".join(encode_measurement(m) for m in measurements)
