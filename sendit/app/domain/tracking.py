"""
Tracking number generation.

Numbers look like ``SIT<base36 ms timestamp><6 random base36 chars>``.
They are collision resistant, not unique by construction: the unique index
on delivery_orders.tracking_number is what enforces uniqueness.
"""

import secrets
import string
import time

BASE36_ALPHABET = string.digits + string.ascii_uppercase
RANDOM_SUFFIX_LENGTH = 6


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_tracking_number(prefix: str = "SIT") -> str:
    timestamp = to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{prefix}{timestamp}{suffix}".upper()
