"""Number and text helpers: crore/arab wording, capitalisation, issue symbols."""

from __future__ import annotations

import math

_LAKH = 1e5
_CRORE = 1e7
_ARAB = 1e9

_SUFFIXES = {
    "ordinary": "ORD",
    "migrant workers": "MW",
    "local": "LO",
}


def number_to_crore_arab(num):
    """Describe num coarsely, e.g. in arab and crore with a trailing '+'."""
    if num < 0:
        return "-" + number_to_crore_arab(-num)
    if num >= 1000 * _ARAB:
        return "1000 arab"

    arab_count = math.floor(num / _ARAB)
    remaining = num - arab_count * _ARAB
    crore_count = math.floor(remaining / _CRORE)

    if arab_count > 0:
        result = f"{arab_count:.0f} arab"
        if crore_count > 0:
            result += f", {crore_count:.0f} crore+"
    elif crore_count > 0:
        result = f"{crore_count:.0f} crore+"
    elif num >= _LAKH:
        result = f"{math.floor(num / _LAKH):.0f} lakh+"
    else:
        result = f"{num:.0f}"
    return result or "0"


def number_to_crore_arab_full(num):
    """Describe num in arab, crore and lakh, or plainly when under a crore."""
    if num < 0:
        return "-" + number_to_crore_arab_full(-num)
    if num >= 1000 * _ARAB:
        return "1000 arab"
    if num >= 100 * _ARAB:
        return "100 arab"

    arab_count = math.floor(num / _ARAB)
    remaining_after_arab = num - arab_count * _ARAB
    crore_count = math.floor(remaining_after_arab / _CRORE)
    remaining = remaining_after_arab - crore_count * _CRORE

    parts = []
    if arab_count > 0:
        parts.append(f"{arab_count:.0f} arab")
    if crore_count > 0:
        parts.append(f"{crore_count:.0f} crore")
    if remaining > 0 and num < _CRORE:
        return f"{num:.2f}"
    if remaining > 0:
        parts.append(f"{remaining / _LAKH:.2f} lakh")
    return " ".join(parts) or "0"


def capitalize_first_letter(s):
    """Capitalise each whitespace-separated word and lower-case the rest."""
    if not s:
        return s
    return " ".join(word[:1].upper() + word[1:].lower() for word in s.split())


def generate_unique_symbol(share_type, stock_symbol):
    """Join a stock symbol with a suffix naming its share type."""
    suffix = _SUFFIXES.get(share_type.lower(), "OT")
    return f"{stock_symbol}_{suffix}"