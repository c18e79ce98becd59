"""Display formatting helpers (pt-BR conventions)."""

import re
import unicodedata
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from agenda.utils.dates import from_utc, parse_datetime

CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}

MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)
WEEKDAY_NAMES = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)


def format_date(value: datetime | str, fmt: str = "%d/%m/%Y", timezone: str | None = None) -> str:
    """
    Format a date, converting to ``timezone`` first when given.

    ``%B`` and ``%A`` render pt-BR month and weekday names.
    """
    moment = parse_datetime(value)
    if timezone:
        moment = from_utc(moment, timezone)
    # Month and weekday names are always Portuguese, whatever the process locale
    fmt = fmt.replace("%B", MONTH_NAMES[moment.month - 1])
    fmt = fmt.replace("%A", WEEKDAY_NAMES[moment.weekday()])
    return moment.strftime(fmt)


def format_time(value: datetime | str, fmt: str = "%H:%M", timezone: str | None = None) -> str:
    """Format a time of day."""
    return format_date(value, fmt, timezone)


def format_datetime(
    value: datetime | str, fmt: str = "%d/%m/%Y %H:%M", timezone: str | None = None
) -> str:
    """Format a date and time."""
    return format_date(value, fmt, timezone)


def format_currency(amount: Decimal | float | int, currency: str = "BRL") -> str:
    """
    Format an amount the pt-BR way, e.g. ``R$ 1.234,56``.

    Negative amounts are prefixed with a minus sign.
    """
    quantized = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    integer, fraction = f"{abs(quantized):.2f}".split(".")
    grouped = f"{int(integer):,}".replace(",", ".")
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{sign}{symbol} {grouped},{fraction}"


def format_phone(phone: str) -> str:
    """Format a Brazilian phone number; other inputs are returned unchanged."""
    digits = re.sub(r"\D", "", phone)

    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"

    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"

    return phone


def format_cpf(cpf: str) -> str:
    """Format a CPF as ``000.000.000-00``."""
    digits = re.sub(r"\D", "", cpf)
    return re.sub(r"^(\d{3})(\d{3})(\d{3})(\d{2})$", r"\1.\2.\3-\4", digits)


def format_cnpj(cnpj: str) -> str:
    """Format a CNPJ as ``00.000.000/0000-00``."""
    digits = re.sub(r"\D", "", cnpj)
    return re.sub(r"^(\d{2})(\d{3})(\d{3})(\d{4})(\d{2})$", r"\1.\2.\3/\4-\5", digits)


def format_cep(cep: str) -> str:
    """Format a postal code as ``00000-000``."""
    digits = re.sub(r"\D", "", cep)
    return re.sub(r"^(\d{5})(\d{3})$", r"\1-\2", digits)


def slugify(text: str) -> str:
    """Lowercase ASCII slug with single hyphens."""
    normalized = unicodedata.normalize("NFD", text.lower())
    ascii_text = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    ascii_text = re.sub(r"[^a-z0-9\s-]", "", ascii_text)
    ascii_text = re.sub(r"\s+", "-", ascii_text.strip())
    return re.sub(r"-+", "-", ascii_text)


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to ``max_length`` characters, adding an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def capitalize(text: str) -> str:
    """Uppercase the first letter, lowercase the rest."""
    return text[:1].upper() + text[1:].lower()


def title_case(text: str) -> str:
    """Capitalize every space-separated word."""
    return " ".join(capitalize(word) for word in text.lower().split(" "))
