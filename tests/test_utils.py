"""Tests for formatting, validation, date and collection helpers."""

from datetime import UTC, date, datetime
from decimal import Decimal

from agenda.utils.collections import count_by, group_by, sort_by, unique_by
from agenda.utils.dates import (
    appointment_duration_minutes,
    day_of_week,
    from_utc,
    generate_time_slots,
    is_valid_appointment_time,
    is_valid_date,
    local_day_bounds,
    to_utc,
)
from agenda.utils.formatting import (
    format_cep,
    format_cnpj,
    format_cpf,
    format_currency,
    format_date,
    format_datetime,
    format_phone,
    format_time,
    slugify,
    title_case,
    truncate_text,
)
from agenda.utils.identifiers import (
    generate_api_key,
    generate_id,
    generate_idempotency_key,
    generate_random_string,
    generate_secret_key,
)
from agenda.utils.pagination import calculate_pagination, page_offset
from agenda.utils.validators import is_valid_cnpj, is_valid_cpf, is_valid_email, is_valid_phone

SAO_PAULO = "America/Sao_Paulo"
MONDAY_1PM_UTC = datetime(2030, 1, 7, 13, 0, tzinfo=UTC)


def test_format_currency_brl() -> None:
    """Amounts use dot thousands separators and a decimal comma."""
    assert format_currency(Decimal("1234.56")) == "R$ 1.234,56"
    assert format_currency(80) == "R$ 80,00"
    assert format_currency(0.005) == "R$ 0,01"
    assert format_currency(-5) == "-R$ 5,00"
    assert format_currency(10, "USD") == "US$ 10,00"


def test_format_date_in_unit_timezone() -> None:
    """Dates are converted to the zone and use Portuguese names."""
    assert format_date(MONDAY_1PM_UTC, timezone=SAO_PAULO) == "07/01/2030"
    assert format_time(MONDAY_1PM_UTC, timezone=SAO_PAULO) == "10:00"
    assert format_date(MONDAY_1PM_UTC, "%A, %d de %B de %Y", SAO_PAULO) == (
        "segunda-feira, 07 de janeiro de 2030"
    )
    # Crossing midnight backwards
    assert format_datetime("2030-01-07T02:00:00Z", timezone=SAO_PAULO) == "06/01/2030 23:00"


def test_format_documents() -> None:
    """Phone, CPF, CNPJ and CEP formatting."""
    assert format_phone("11987654321") == "(11) 98765-4321"
    assert format_phone("1134567890") == "(11) 3456-7890"
    assert format_phone("+1 555") == "+1 555"
    assert format_cpf("52998224725") == "529.982.247-25"
    assert format_cnpj("11222333000181") == "11.222.333/0001-81"
    assert format_cep("01310100") == "01310-100"


def test_text_helpers() -> None:
    """Slugs are ASCII; truncation adds an ellipsis; title case per word."""
    assert slugify("Corte de Cabelo & Barba") == "corte-de-cabelo-barba"
    assert slugify("Ação Rápida") == "acao-rapida"
    assert truncate_text("manicure", 4) == "mani..."
    assert truncate_text("pé", 4) == "pé"
    assert title_case("maria DA silva") == "Maria Da Silva"


def test_cpf_and_cnpj_validation() -> None:
    """Check digits are verified and repeated digits rejected."""
    assert is_valid_cpf("529.982.247-25")
    assert not is_valid_cpf("529.982.247-24")
    assert not is_valid_cpf("111.111.111-11")
    assert not is_valid_cpf("1234")
    assert is_valid_cnpj("11.222.333/0001-81")
    assert not is_valid_cnpj("11.222.333/0001-80")
    assert not is_valid_cnpj("00000000000000")


def test_email_and_phone_validation() -> None:
    """Loose email check and E.164 phone check."""
    assert is_valid_email("carla@gmail.com")
    assert not is_valid_email("carla@gmail")
    assert not is_valid_email("carla gmail.com")
    assert is_valid_phone("+5511987654321")
    assert not is_valid_phone("0123")
    assert not is_valid_phone("+55 11 98765-4321")


def test_timezone_conversion() -> None:
    """Naive values are read as local time in the given zone."""
    assert to_utc("2030-01-07T10:00:00", SAO_PAULO) == MONDAY_1PM_UTC
    assert to_utc(MONDAY_1PM_UTC) == MONDAY_1PM_UTC
    assert from_utc(MONDAY_1PM_UTC, SAO_PAULO).hour == 10


def test_local_day_bounds() -> None:
    """A local day maps to a half-open UTC range."""
    start, end = local_day_bounds(date(2030, 1, 7), SAO_PAULO)

    assert start == datetime(2030, 1, 7, 3, 0, tzinfo=UTC)
    assert end == datetime(2030, 1, 8, 3, 0, tzinfo=UTC)


def test_date_helpers() -> None:
    """Weekday numbering, slot labels, durations and business hours."""
    assert day_of_week("2030-01-06") == 0
    assert day_of_week(date(2030, 1, 7)) == 1
    assert is_valid_date("2030-01-07")
    assert not is_valid_date("07/01/2030")
    assert generate_time_slots("09:00", "10:00", 20) == ["09:00", "09:20", "09:40"]
    assert appointment_duration_minutes("2030-01-07T09:00:00", "2030-01-07T10:30:00") == 90
    assert is_valid_appointment_time(
        "2030-01-07T09:00:00", "2030-01-07T09:30:00", "08:00", "18:00"
    )
    assert not is_valid_appointment_time(
        "2030-01-06T09:00:00", "2030-01-06T09:30:00", "08:00", "18:00"
    )
    assert not is_valid_appointment_time(
        "2030-01-07T17:45:00", "2030-01-07T18:15:00", "08:00", "18:00"
    )


def test_identifiers() -> None:
    """Generated identifiers have their prefixes and lengths."""
    assert len(generate_id()) == 16
    assert generate_idempotency_key().startswith("idemp_")
    assert len(generate_idempotency_key()) == 38
    assert generate_api_key().startswith("pk_")
    assert len(generate_secret_key()) == 67
    assert generate_random_string(12).isalnum()
    assert generate_id() != generate_id()


def test_pagination() -> None:
    """Page metadata rounds up and flags further pages."""
    meta = calculate_pagination(page=2, limit=10, total=25)
    assert meta.total_pages == 3
    assert meta.has_more

    last = calculate_pagination(page=3, limit=10, total=25)
    assert not last.has_more

    empty = calculate_pagination(page=1, limit=10, total=0)
    assert empty.total_pages == 0
    assert not empty.has_more

    assert page_offset(3, 20) == 40


def test_collection_helpers() -> None:
    """Grouping and counting key on the string form of a field."""
    rows = [
        {"status": "pending", "name": "b"},
        {"status": "confirmed", "name": "a"},
        {"status": "pending", "name": "c"},
    ]

    assert list(group_by(rows, "status")) == ["pending", "confirmed"]
    assert count_by(rows, "status") == {"pending": 2, "confirmed": 1}
    assert [row["name"] for row in unique_by(rows, "status")] == ["b", "a"]
    assert [row["name"] for row in sort_by(rows, "name", "desc")] == ["c", "b", "a"]
