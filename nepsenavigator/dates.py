"""Rendering of AD (Gregorian) and BS (Nepali) dates for messages."""

from __future__ import annotations

import re

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel

ENGLISH_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

NEPALI_MONTHS = (
    "Baisakh", "Jestha", "Ashadh", "Shrawan", "Bhadra", "Ashoj",
    "Kartik", "Mangsir", "Poush", "Magh", "Falgun", "Chaitra",
)

_INTEGER = re.compile(r"[+-]?[0-9]+")


class DateFormatError(ValueError):
    """A date string is not in YYYY-MM-DD form or is out of range."""


def _to_int(text, what):
    if not _INTEGER.fullmatch(text):
        raise DateFormatError(f"invalid {what}: {text!r}")
    return int(text)


def _month_and_day(date, month_names):
    parts = date.split("-")
    if len(parts) != 3:
        raise DateFormatError(f"invalid date format: {date}")
    year, month_text, day_text = parts
    _to_int(year, "year")
    month = _to_int(month_text, "month")
    if not 1 <= month <= 12:
        raise DateFormatError(f"invalid month: {month_text!r}")
    day = _to_int(day_text, "day")
    if not 1 <= day <= 31:
        raise DateFormatError(f"invalid day: {day_text!r}")
    return f"{month_names[month - 1]} {day}"


def _parse(date, month_names, label):
    applog.log(LogLevel.INFO, "Parsing %s date: %s", label, date)
    try:
        result = _month_and_day(date, month_names)
    except DateFormatError as exc:
        applog.log(LogLevel.ERROR, "%s", exc)
        raise
    applog.log(LogLevel.INFO, "Parsed %s date result: %s", label, result)
    return result


def parse_nepali_date(date):
    """Turn a BS 'YYYY-MM-DD' date into 'Month D'."""
    return _parse(date, NEPALI_MONTHS, "Nepali")


def parse_english_month(date):
    """Turn an AD 'YYYY-MM-DD' date into 'Mon D'."""
    return _parse(date, ENGLISH_MONTHS, "English")


def convert_date(ad_date, bs_date):
    """Render 'BSMonth D ( ADMon D )'; a part that fails to parse is left empty."""
    try:
        ad_part = parse_english_month(ad_date)
    except DateFormatError:
        ad_part = ""
    try:
        bs_part = parse_nepali_date(bs_date)
    except DateFormatError:
        bs_part = ""
    return f"{bs_part} ( {ad_part} )"


def bs_date_convert(bs_date):
    """Render a BS 'YYYY-MM-DD' date as 'DD Month YYYY', keeping the day text."""
    parts = bs_date.split("-")
    if len(parts) < 3:
        raise DateFormatError(f"invalid date format: {bs_date}")
    year, month_text, day = parts[0], parts[1], parts[2]
    month = _to_int(month_text, "month")
    if not 1 <= month <= 12:
        raise DateFormatError(f"invalid month: {month_text!r}")
    return f"{day} {NEPALI_MONTHS[month - 1]} {year}"