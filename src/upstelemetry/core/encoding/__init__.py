"""Wire encoders for measurements."""

from upstelemetry.core.encoding.line_protocol import (
    encode_field,
    encode_measurement,
    encode_measurements,
    encode_tag,
)

__all__ = [
    "encode_field",
    "encode_measurement",
    "encode_measurements",
    "encode_tag",
]
