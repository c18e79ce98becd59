"""Format and checksum validators."""

import re

from agenda.schemas.common import PHONE_PATTERN

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    """Loose syntactic email check."""
    return EMAIL_PATTERN.match(email) is not None


def is_valid_phone(phone: str) -> bool:
    """Check an E.164-style phone number."""
    return re.fullmatch(PHONE_PATTERN, phone) is not None


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value)


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(cpf: str) -> bool:
    """
    Validate a Brazilian CPF.

    Accepts formatted or bare input. Sequences of one repeated digit are
    rejected even though their check digits work out.
    """
    digits = _digits(cpf)
    if len(digits) != 11 or len(set(digits)) == 1:
        return False

    first = _cpf_check_digit(digits[:9])
    second = _cpf_check_digit(digits[:10])
    return first == int(digits[9]) and second == int(digits[10])


CNPJ_WEIGHTS_FIRST = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_SECOND = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def _cnpj_check_digit(digits: str, weights: tuple[int, ...]) -> int:
    remainder = sum(int(d) * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cnpj(cnpj: str) -> bool:
    """Validate a Brazilian CNPJ (formatted or bare)."""
    digits = _digits(cnpj)
    if len(digits) != 14 or len(set(digits)) == 1:
        return False

    first = _cnpj_check_digit(digits[:12], CNPJ_WEIGHTS_FIRST)
    second = _cnpj_check_digit(digits[:13], CNPJ_WEIGHTS_SECOND)
    return first == int(digits[12]) and second == int(digits[13])
