"""Telegram message texts announcing IPO and FPO issues."""

from __future__ import annotations

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel
from nepsenavigator.dates import convert_date
from nepsenavigator.numbers import capitalize_first_letter
from nepsenavigator.oversubscription import get_ipo_oversubscription

_RULE = "=" * 32
_WARNING = "\u26a0\ufe0f"


def display_status(status):
    """Show 'Nearing' issues as 'Upcoming'."""
    return "Upcoming" if status == "Nearing" else status


def issue_type(share_type):
    """Name the audience of an issue for display."""
    if share_type == "ordinary":
        return "General Public"
    if share_type == "Migrant Workers":
        return "Foreign Employment"
    return share_type


def format_ipo_message(ipo):
    """Markdown announcement of a new or changed issue."""
    applog.log(LogLevel.INFO, "Formatting IPO message for company: %s", ipo.company_name)
    opening_date = convert_date(ipo.opening_date_ad, ipo.opening_date_bs)
    closing_date = convert_date(ipo.closing_date_ad, ipo.closing_date_bs)
    status = display_status(ipo.status).upper()
    audience = capitalize_first_letter(issue_type(ipo.share_type))

    text = (
        f"📢 *{status} {ipo.kind} ALERT* 📢\n"
        f"{_RULE}\n\n"
        f"🏢 *Company Name:* {ipo.company_name}\n"
        f"💼 *Symbol:* {ipo.stock_symbol}\n"
        f"📊 *Issue Type:* {audience}\n"
        f"🏦 *Sector:* {ipo.sector_name}\n"
        f"📈 *Current Status:* {status}\n\n"
        f"💵 *Price Per Unit:* Rs. {ipo.price_per_unit}\n"
        f"📅 *Min/Max Units:* {ipo.min_units} / {ipo.max_units}\n\n"
        f"🔓 *Opening Date:* {opening_date}\n"
        f"🔒 *Closing Date:* {closing_date}\n"
        f"⏰ *Closing Time:* {ipo.closing_date_closing_time}\n\n"
        f"📜 *Share Registrar:* {ipo.share_registrar}\n"
    )
    if ipo.rating:
        text += f"⭐ *Rating:* {ipo.rating}\n"
    text += f"\n{_RULE}\n"

    applog.log(LogLevel.INFO, "Formatted IPO message for company: %s", ipo.company_name)
    return text


def format_ipo_alert_message(ipo, oversubscription=None):
    """Markdown reminder sent an hour before an issue closes.

    When oversubscription is None it is looked up for the issue's symbol.
    """
    applog.log(
        LogLevel.INFO, "Formatting IPO alert message for company: %s", ipo.company_name
    )
    closing_date = convert_date(ipo.closing_date_ad, ipo.closing_date_bs)
    status = display_status(ipo.status).upper()
    audience = capitalize_first_letter(issue_type(ipo.share_type))
    if oversubscription is None:
        oversubscription = get_ipo_oversubscription(ipo.stock_symbol)
    symbol = ipo.stock_symbol.upper()

    text = (
        f"{_WARNING} *HURRY UP! Only 1 Hour Left to Apply for {symbol}!* {_WARNING}\n"
        f"{_RULE}\n\n"
        f"🏢 *Company Name:* {ipo.company_name}\n"
        f"💼 *Symbol:* {symbol}\n"
        f"📊 *Issue Type:* {audience}\n"
        f"🏦 *Sector:* {ipo.sector_name}\n"
        f"📈 *Current Status:* {status}\n\n"
        f"🔒 *Closing Date:* {closing_date}\n"
        f"⏰ *Closing Time:* {ipo.closing_date_closing_time}\n"
    )
    if oversubscription:
        text += f"🔢 *Oversubscription:* {oversubscription}x\n"
    text += f"\n{_RULE}"

    applog.log(
        LogLevel.INFO, "Formatted IPO alert message for company: %s", ipo.company_name
    )
    return text