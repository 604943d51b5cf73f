"""Answers to the market data queries, read from the document database."""

from __future__ import annotations

from dataclasses import dataclass, field

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel
from nepsenavigator.records import (
    IndicesRecord,
    IPOAndFpoAlertRecord,
    MarketMoversRecord,
    MarketRecord,
    MarketStatusRecord,
    NepseIndexRecord,
)

_DEFAULT_TOP = 5
_NO_DOCUMENT = "mongo: no documents in result"


class ResolverError(Exception):
    """A query could not be answered."""


def _int32(value):
    return (value + 2**31) % 2**32 - 2**31


@dataclass
class MarketMoverResult:
    stock_symbol: str = ""
    company_name: str = ""
    no_of_transactions: int = 0
    max_price: float = 0.0
    min_price: float = 0.0
    opening_price: float = 0.0
    closing_price: float = 0.0
    amount: float = 0.0
    previous_closing: float = 0.0
    difference_rs: float = 0.0
    percent_change: float = 0.0
    volume: int = 0
    trade_date: str = ""


@dataclass
class MarketMoversResult:
    gainers: list[MarketMoverResult] = field(default_factory=list)
    losers: list[MarketMoverResult] = field(default_factory=list)


@dataclass
class NepseIndexResult:
    index_name: str = ""
    index_value: float = 0.0
    previous_value: float = 0.0
    opening_value: float = 0.0
    percent_change: float = 0.0
    difference: float = 0.0
    turnover: float = 0.0
    volume: int = 0
    market_cap: float = 0.0
    day_high: float = 0.0
    day_low: float = 0.0
    year_high: float = 0.0
    year_low: float = 0.0
    as_of_date: str = ""


@dataclass
class MarketResult:
    symbol: str = ""
    company: str = ""
    trade_volume: int = 0
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    close: float = 0.0
    total_traded_value: float = 0.0
    prev_close: float = 0.0
    price_change: float = 0.0
    percent_change: float = 0.0
    share_volume: int = 0
    lastupdated: str = ""


@dataclass
class IndicesResult:
    index_name: str = ""
    index_value: float = 0.0
    previous_value: float = 0.0
    opening_value: float = 0.0
    percent_change: float = 0.0
    difference: float = 0.0
    turnover: float = 0.0
    volume: int = 0
    no_of_listed_companies: int = 0
    no_of_traded_companies: int = 0
    no_of_transactions: int = 0
    no_of_listed_shares: int = 0
    market_cap: float = 0.0
    day_high: float = 0.0
    day_low: float = 0.0
    year_high: float = 0.0
    year_low: float = 0.0
    as_of_date: str = ""
    as_of_date_string: str = ""
    no_of_gainers: int = 0
    no_of_losers: int = 0
    no_of_unchanged: int = 0


@dataclass
class IPOAlertResult:
    unique_symbol: str = ""
    company_name: str = ""
    stock_symbol: str = ""
    share_registrar: str = ""
    sector_name: str = ""
    share_type: str = ""
    price_per_unit: str = ""
    rating: str = ""
    units: str = ""
    min_units: str = ""
    max_units: str = ""
    total_amount: str = ""
    opening_date_ad: str = ""
    opening_date_bs: str = ""
    closing_date_ad: str = ""
    closing_date_bs: str = ""
    closing_date_closing_time: str = ""
    status: str = ""


@dataclass
class IPOAndFpoAlertResult:
    ipo: list[IPOAlertResult] = field(default_factory=list)
    fpo: list[IPOAlertResult] = field(default_factory=list)


@dataclass
class MarketStatusResult:
    is_market_open: bool = False


def _top_or_default(top):
    return top if top > 0 else _DEFAULT_TOP


def map_market_movers(movers, top):
    """Movers sorted by percent change, highest first, cut to top (5 if top <= 0)."""
    results = [
        MarketMoverResult(
            stock_symbol=mover.stock_code,
            company_name=mover.company,
            no_of_transactions=mover.transactions_count,
            max_price=mover.highest_price,
            min_price=mover.lowest_price,
            opening_price=mover.opening_price,
            closing_price=mover.closing_price,
            amount=mover.turnover,
            previous_closing=mover.previous_close,
            difference_rs=mover.price_change,
            percent_change=mover.percentage_change,
            volume=mover.traded_volume,
            trade_date=mover.trade_date,
        )
        for mover in movers
    ]
    results.sort(key=lambda result: result.percent_change, reverse=True)
    return results[: _top_or_default(top)]


def map_ipo_alerts(alerts):
    """Turn stored issues into query results, keeping their order."""
    return [
        IPOAlertResult(
            unique_symbol=alert.unique_symbol,
            company_name=alert.company_name,
            stock_symbol=alert.stock_symbol,
            share_registrar=alert.share_registrar,
            sector_name=alert.sector_name,
            share_type=alert.share_type,
            price_per_unit=alert.price_per_unit,
            rating=alert.rating,
            units=alert.units,
            min_units=alert.min_units,
            max_units=alert.max_units,
            total_amount=alert.total_amount,
            opening_date_ad=alert.opening_date_ad,
            opening_date_bs=alert.opening_date_bs,
            closing_date_ad=alert.closing_date_ad,
            closing_date_bs=alert.closing_date_bs,
            closing_date_closing_time=alert.closing_date_closing_time,
            status=alert.status,
        )
        for alert in alerts
    ]


def _market_result(market):
    return MarketResult(
        symbol=market.symbol,
        company=market.company,
        trade_volume=market.trade_volume,
        high=market.high,
        low=market.low,
        open=market.open,
        close=market.close,
        total_traded_value=market.total_traded_value,
        prev_close=market.prev_close,
        price_change=market.price_change,
        percent_change=market.percent_change,
        share_volume=market.share_volume,
        lastupdated=market.last_updated,
    )


def _indices_result(index):
    return IndicesResult(
        index_name=index.index_name,
        index_value=index.index_value,
        previous_value=index.previous_value,
        opening_value=index.opening_value,
        percent_change=index.percent_change,
        difference=index.difference,
        turnover=index.turnover,
        volume=index.volume,
        no_of_listed_companies=index.total_companies,
        no_of_traded_companies=index.traded_companies,
        no_of_transactions=index.transactions,
        no_of_listed_shares=_int32(index.listed_shares),
        market_cap=index.market_cap,
        day_high=index.daily_high,
        day_low=index.daily_low,
        year_high=index.yearly_high,
        year_low=index.yearly_low,
        as_of_date=index.report_date,
        as_of_date_string=index.report_date_string,
        no_of_gainers=index.gaining_companies,
        no_of_losers=index.losing_companies,
        no_of_unchanged=index.unchanged,
    )


class QueryResolver:
    """Resolves queries against a database of named collections.

    The database is indexed by collection name; collections offer
    find_one(filter) and find(filter) as document database drivers do.
    """

    def __init__(self, database):
        self.database = database

    def _find_one(self, collection, query, record):
        document = self.database[collection].find_one(query)
        if document is None:
            raise LookupError(_NO_DOCUMENT)
        return record.from_document(document)

    def _find_all(self, collection, record, what, noun):
        try:
            cursor = self.database[collection].find({})
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Failed to fetch %s: %s", what, exc)
            raise ResolverError(f"failed to fetch {what}: {exc}") from exc
        try:
            documents = list(cursor)
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Cursor error: %s", exc)
            raise ResolverError(f"cursor error: {exc}") from exc
        finally:
            close = getattr(cursor, "close", None)
            if close is not None:
                close()
        records = []
        for document in documents:
            try:
                records.append(record.from_document(document))
            except TypeError as exc:
                applog.log(LogLevel.ERROR, "Failed to decode %s: %s", noun, exc)
                raise ResolverError(f"failed to decode {noun}: {exc}") from exc
        return records

    def get_market_movers(self, top):
        """The top gainers and losers of the day."""
        applog.log(LogLevel.INFO, "Fetching market movers with top %d", top)
        try:
            movers = self._find_one("marketmovers", {}, MarketMoversRecord)
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Failed to fetch market movers: %s", exc)
            raise ResolverError(f"failed to fetch market movers: {exc}") from exc
        if top > len(movers.gainers) or top > len(movers.losers):
            applog.log(
                LogLevel.WARN,
                "Requested top %d is greater than available gainers or losers",
                top,
            )
            raise ResolverError(
                f"requested top {top} is greater than available gainers or losers"
            )
        applog.log(LogLevel.INFO, "Successfully fetched market movers")
        return MarketMoversResult(
            gainers=map_market_movers(movers.gainers, top),
            losers=map_market_movers(movers.losers, top),
        )

    def get_nepse_index(self):
        """The headline index."""
        applog.log(LogLevel.INFO, "Fetching NEPSE index")
        try:
            index = self._find_one("nepse-data", {}, NepseIndexRecord)
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Failed to fetch NEPSE index: %s", exc)
            raise ResolverError(f"failed to fetch nepse index: {exc}") from exc
        applog.log(LogLevel.INFO, "Successfully fetched NEPSE index")
        return NepseIndexResult(
            index_name=index.market_index,
            index_value=index.current_value,
            previous_value=index.previous_close,
            opening_value=index.opening_value,
            percent_change=index.percentage_change,
            difference=index.point_change,
            turnover=index.total_turnover,
            volume=index.traded_volume,
            market_cap=index.market_capitalization,
            day_high=index.daily_high,
            day_low=index.daily_low,
            year_high=index.yearly_high,
            year_low=index.yearly_low,
            as_of_date=index.date,
        )

    def get_markets(self):
        """Live figures of every stock, in stored order."""
        applog.log(LogLevel.INFO, "Fetching markets")
        records = self._find_all("market-data", MarketRecord, "markets", "market")
        applog.log(LogLevel.INFO, "Successfully fetched markets")
        return [_market_result(record) for record in records]

    def get_indices(self, top):
        """The indices with the largest percent change, highest first."""
        applog.log(LogLevel.INFO, "Fetching indices with top %d", top)
        records = self._find_all("indices-data", IndicesRecord, "indices", "index")
        if top > len(records):
            applog.log(
                LogLevel.WARN, "Requested top %d is greater than available indices", top
            )
            raise ResolverError(f"only {len(records)} indices available")
        indices = [_indices_result(record) for record in records]
        indices.sort(key=lambda index: index.percent_change, reverse=True)
        applog.log(LogLevel.INFO, "Successfully fetched indices")
        return indices[: _top_or_default(top)]

    def get_ipo_and_fpo_alerts(self):
        """The current IPO and FPO issues."""
        applog.log(LogLevel.INFO, "Fetching IPO and FPO alerts")
        try:
            alerts = self._find_one("ipo-fpo", {}, IPOAndFpoAlertRecord)
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Failed to fetch IPO and FPO alerts: %s", exc)
            raise ResolverError(f"failed to fetch IPO and FPO alerts: {exc}") from exc
        applog.log(LogLevel.INFO, "Successfully fetched IPO and FPO alerts")
        return IPOAndFpoAlertResult(
            ipo=map_ipo_alerts(alerts.ipo), fpo=map_ipo_alerts(alerts.fpo)
        )

    def get_market_by_symbol(self, stock_symbol):
        """Live figures of one stock."""
        applog.log(LogLevel.INFO, "Fetching market by symbol: %s", stock_symbol)
        try:
            market = self._find_one(
                "market-data", {"symbol": stock_symbol}, MarketRecord
            )
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Failed to fetch market by symbol: %s", exc)
            raise ResolverError(f"failed to fetch market by symbol: {exc}") from exc
        applog.log(LogLevel.INFO, "Successfully fetched market by symbol")
        return _market_result(market)

    def get_market_status(self):
        """Whether the market is open."""
        applog.log(LogLevel.INFO, "Fetching market status")
        try:
            status = self._find_one("market-status", {}, MarketStatusRecord)
        except Exception as exc:
            applog.log(LogLevel.ERROR, "Cannot retrieve market status: %s", exc)
            raise ResolverError("cannot retrieve market status") from exc
        applog.log(LogLevel.INFO, "Successfully fetched market status")
        return MarketStatusResult(
            is_market_open=status.is_open.casefold() == "open".casefold()
        )