"""Brazilian CPF (tax id) checksum validation."""

import re

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_cpf(value: str) -> str:
    """Strip punctuation and whitespace, keeping only ASCII digits."""
    if not isinstance(value, str):
        return ""
    return _NON_DIGITS.sub("", value)


def _check_digit(digits: list, first_weight: int) -> int:
    total = sum(d * w for d, w in zip(digits, range(first_weight, 1, -1)))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cpf(value: str) -> bool:
    """
    Check a CPF number by its two check digits.

    Accepts formatted input ("529.982.247-25"). Anything that does not reduce
    to 11 digits, or whose digits are all the same, is invalid. Never raises.
    """
    cpf = normalize_cpf(value)
    if len(cpf) != 11:
        return False

    # 000.000.000-00, 111.111.111-11, ... satisfy the checksum but are not issued
    if len(set(cpf)) == 1:
        return False

    digits = [int(c) for c in cpf]

    if _check_digit(digits[:9], 10) != digits[9]:
        return False

    return _check_digit(digits[:10], 11) == digits[10]
