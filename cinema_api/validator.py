# cinema_api/validator.py
import re
from typing import Dict, Hashable, Iterable, Pattern

from .errors import FailedValidationError

# Pattern from https://html.spec.whatwg.org/#valid-e-mail-address
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    """
    Accumulates field-keyed validation messages.

    Checks never raise; every violation for one submitted object is collected
    so it can be reported in a single response. Only the first message per
    field is kept.
    """

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)

    def raise_if_invalid(self) -> None:
        """Raise FailedValidationError carrying every accumulated message."""
        if not self.valid():
            raise FailedValidationError(self.errors)


def permitted_value(value: Hashable, *permitted_values: Hashable) -> bool:
    return value in permitted_values


def matches(value: str, rx: Pattern[str]) -> bool:
    return rx.fullmatch(value) is not None


def unique(values: Iterable[Hashable]) -> bool:
    values = list(values)
    return len(values) == len(set(values))
