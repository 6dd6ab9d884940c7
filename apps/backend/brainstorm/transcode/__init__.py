"""XML-like transcoding between application records and model text."""

from .decode import CanonicalValue, decode
from .encode import encode

__all__ = [
    "CanonicalValue",
    "decode",
    "encode",
]
