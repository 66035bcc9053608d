# cinema_api/movies/runtime.py
import re
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

_MINUTES_RX = re.compile(r"[+-]?[0-9]+")

# Runtimes are stored in a signed 64-bit INTEGER column
MIN_RUNTIME = -(2 ** 63)
MAX_RUNTIME = 2 ** 63 - 1


class InvalidRuntimeFormatError(ValueError):
    """Raised when a runtime is not of the form "<N> mins"."""

    def __init__(self, value: Any = None):
        self.value = value
        super().__init__("invalid runtime format")


def encode_runtime(minutes: int) -> str:
    return f"{minutes} mins"


def decode_runtime(value: Any) -> int:
    """
    Parse the "<N> mins" wire form into whole minutes.

    Raises:
        InvalidRuntimeFormatError: For anything that is not a string made of
            a signed 64-bit integer, one space and the literal "mins".
    """
    if not isinstance(value, str):
        raise InvalidRuntimeFormatError(value)

    parts = value.split(" ")
    if len(parts) != 2 or parts[1] != "mins":
        raise InvalidRuntimeFormatError(value)

    if not _MINUTES_RX.fullmatch(parts[0]):
        raise InvalidRuntimeFormatError(value)

    minutes = int(parts[0])
    if not MIN_RUNTIME <= minutes <= MAX_RUNTIME:
        raise InvalidRuntimeFormatError(value)
    return minutes


# Stored and handled as int minutes, rendered as "<N> mins" in JSON output
Runtime = Annotated[int, PlainSerializer(encode_runtime, return_type=str, when_used="json")]

# Accepted from request bodies only in the "<N> mins" form
RuntimeInput = Annotated[int, BeforeValidator(decode_runtime)]
