"""Market documents as they are kept in the document database."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields


def _key(name, kind):
    return field(default=kind(), metadata={"key": name, "kind": kind})


def _value(doc, key, kind):
    value = doc.get(key)
    if value is None:
        return kind()
    if kind is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{key} must be a number, not {type(value).__name__}")
        return float(value)
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{key} must be an integer, not {type(value).__name__}")
        return value
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, not {type(value).__name__}")
    return value


def _document(doc):
    if not isinstance(doc, Mapping):
        raise TypeError(f"document must be a mapping, not {type(doc).__name__}")
    return doc


def _decode(cls, doc):
    doc = _document(doc)
    return cls(
        **{
            f.name: _value(doc, f.metadata["key"], f.metadata["kind"])
            for f in fields(cls)
            if "key" in f.metadata
        }
    )


def _list(doc, key, record):
    items = doc.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeError(f"{key} must be a list, not {type(items).__name__}")
    return [record.from_document(item) for item in items]


@dataclass
class MarketMoverRecord:
    """One gaining or losing stock of the day."""

    stock_code: str = _key("stock_code", str)
    company: str = _key("company", str)
    transactions_count: int = _key("transactions_count", int)
    highest_price: float = _key("highest_price", float)
    lowest_price: float = _key("lowest_price", float)
    opening_price: float = _key("opening_price", float)
    closing_price: float = _key("closing_price", float)
    turnover: float = _key("turnover", float)
    previous_close: float = _key("previous_close", float)
    price_change: float = _key("price_change", float)
    percentage_change: float = _key("percentage_change", float)
    traded_volume: int = _key("traded_volume", int)
    trade_date: str = _key("trade_date", str)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)


@dataclass
class MarketMoversRecord:
    """The day's gainers and losers."""

    gainers: list[MarketMoverRecord] = field(default_factory=list)
    losers: list[MarketMoverRecord] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc):
        doc = _document(doc)
        return cls(
            gainers=_list(doc, "gainers", MarketMoverRecord),
            losers=_list(doc, "losers", MarketMoverRecord),
        )


@dataclass
class NepseIndexRecord:
    """The headline index."""

    market_index: str = _key("market_index", str)
    current_value: float = _key("current_value", float)
    previous_close: float = _key("previous_close", float)
    opening_value: float = _key("opening_value", float)
    percentage_change: float = _key("percentage_change", float)
    point_change: float = _key("point_change", float)
    total_turnover: float = _key("total_turnover", float)
    traded_volume: int = _key("traded_volume", int)
    market_capitalization: float = _key("market_capitalization", float)
    daily_high: float = _key("daily_high", float)
    daily_low: float = _key("daily_low", float)
    yearly_high: float = _key("yearly_high", float)
    yearly_low: float = _key("yearly_low", float)
    date: str = _key("date", str)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)


@dataclass
class IPOAlertRecord:
    """An IPO or FPO issue."""

    unique_symbol: str = _key("unique_symbol", str)
    company_name: str = _key("company_name", str)
    stock_symbol: str = _key("stock_symbol", str)
    share_registrar: str = _key("share_registrar", str)
    sector_name: str = _key("sector_name", str)
    share_type: str = _key("share_type", str)
    price_per_unit: str = _key("price_per_unit", str)
    rating: str = _key("rating", str)
    units: str = _key("units", str)
    min_units: str = _key("min_units", str)
    max_units: str = _key("max_units", str)
    total_amount: str = _key("total_amount", str)
    opening_date_ad: str = _key("opening_date_ad", str)
    opening_date_bs: str = _key("opening_date_bs", str)
    closing_date_ad: str = _key("closing_date_ad", str)
    closing_date_bs: str = _key("closing_date_bs", str)
    closing_date_closing_time: str = _key("closing_date_closing_time", str)
    status: str = _key("status", str)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)


@dataclass
class IPOAndFpoAlertRecord:
    """The IPO and FPO issue lists."""

    ipo: list[IPOAlertRecord] = field(default_factory=list)
    fpo: list[IPOAlertRecord] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc):
        doc = _document(doc)
        return cls(
            ipo=_list(doc, "ipo", IPOAlertRecord),
            fpo=_list(doc, "fpo", IPOAlertRecord),
        )


@dataclass
class MarketRecord:
    """Live trading figures of one stock."""

    symbol: str = _key("symbol", str)
    company: str = _key("company", str)
    trade_volume: int = _key("trade_volume", int)
    high: float = _key("high", float)
    low: float = _key("low", float)
    open: float = _key("open", float)
    close: float = _key("close", float)
    total_traded_value: float = _key("total_traded_value", float)
    prev_close: float = _key("prev_close", float)
    price_change: float = _key("price_change", float)
    percent_change: float = _key("percent_change", float)
    share_volume: int = _key("share_volume", int)
    last_updated: str = _key("last_updated", str)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)


@dataclass
class IndicesRecord:
    """One sector or market index."""

    index_name: str = _key("index_name", str)
    index_value: float = _key("index_value", float)
    previous_value: float = _key("previous_value", float)
    opening_value: float = _key("opening_value", float)
    percent_change: float = _key("percent_change", float)
    difference: float = _key("difference", float)
    turnover: float = _key("turnover", float)
    volume: int = _key("volume", int)
    total_companies: int = _key("total_companies", int)
    traded_companies: int = _key("traded_companies", int)
    transactions: int = _key("transactions", int)
    listed_shares: int = _key("listed_shares", int)
    market_cap: float = _key("market_cap", float)
    daily_high: float = _key("daily_high", float)
    daily_low: float = _key("daily_low", float)
    yearly_high: float = _key("yearly_high", float)
    yearly_low: float = _key("yearly_low", float)
    report_date: str = _key("report_date", str)
    report_date_string: str = _key("report_date_string", str)
    gaining_companies: int = _key("gaining_companies", int)
    losing_companies: int = _key("losing_companies", int)
    unchanged: int = _key("unchanged", int)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)


@dataclass
class MarketStatusRecord:
    """Whether the market is open, as the exchange words it."""

    is_open: str = _key("isOpen", str)

    @classmethod
    def from_document(cls, doc):
        return _decode(cls, doc)