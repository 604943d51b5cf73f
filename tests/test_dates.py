import pytest

from nepsenavigator.dates import (
    ENGLISH_MONTHS,
    NEPALI_MONTHS,
    DateFormatError,
    bs_date_convert,
    convert_date,
    parse_english_month,
    parse_nepali_date,
)


def test_parse_nepali_date():
    assert parse_nepali_date("2081-10-15") == "Magh 15"


def test_parse_english_month():
    assert parse_english_month("2025-01-28") == "Jan 28"


def test_leading_zeros_are_ignored():
    assert parse_english_month("2025-03-05") == parse_english_month("2025-3-5")


@pytest.mark.parametrize("month", range(1, 13))
def test_every_month_maps_to_its_name(month):
    assert parse_nepali_date(f"2081-{month}-1") == f"{NEPALI_MONTHS[month - 1]} 1"
    assert parse_english_month(f"2025-{month}-1") == f"{ENGLISH_MONTHS[month - 1]} 1"


@pytest.mark.parametrize(
    "date",
    ["2081-13-01", "2081-00-01", "2081-01-32", "2081-01-00", "abc", "2081-01", "x-01-01",
     "2081-1a-01", "2081-01-", "2081-01-01-01"],
)
@pytest.mark.parametrize("parse", [parse_nepali_date, parse_english_month])
def test_invalid_dates_raise(parse, date):
    with pytest.raises(DateFormatError):
        parse(date)


def test_date_format_error_is_value_error():
    with pytest.raises(ValueError):
        parse_nepali_date("bad")


def test_convert_date_combines_both_parts():
    ad, bs = "2025-01-28", "2081-10-15"
    assert convert_date(ad, bs) == f"{parse_nepali_date(bs)} ( {parse_english_month(ad)} )"


def test_convert_date_leaves_bad_parts_empty():
    assert convert_date("bad", "bad") == " (  )"
    assert convert_date("bad", "2081-10-15") == f"{parse_nepali_date('2081-10-15')} (  )"


def test_bs_date_convert():
    assert bs_date_convert("2081-10-15") == "15 Magh 2081"


def test_bs_date_convert_keeps_day_text():
    result = bs_date_convert("2081-01-05")
    assert result.startswith("05 ")
    assert result.endswith(f" {NEPALI_MONTHS[0]} 2081")


@pytest.mark.parametrize("date", ["2081-13-01", "2081-x-01", "2081", "2081-0-01"])
def test_bs_date_convert_rejects_bad_input(date):
    with pytest.raises(DateFormatError):
        bs_date_convert(date)