"""Data carried between the GraphQL API, the store and the bot messages."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields


def _text(data, key):
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, not {type(value).__name__}")
    return value


def _number(data, key):
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, not {type(value).__name__}")
    return float(value)


def _integer(data, key):
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, not {type(value).__name__}")
    return value


def _flag(data, key):
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, not {type(value).__name__}")
    return value


def _mapping(data, key):
    return data.get(key) or {}


def _items(data, key):
    return data.get(key) or []


@dataclass
class IPOAlertModel:
    """An IPO or FPO issue together with its kind ('IPO' or 'FPO')."""

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
    kind: str = ""


@dataclass
class IPO:
    """An IPO or FPO issue as returned by the API."""

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

    @classmethod
    def from_dict(cls, data):
        """Build from a JSON object; missing or null fields become ''."""
        return cls(**{f.name: _text(data, f.name) for f in fields(cls)})

    def to_alert(self, kind):
        """Tag this issue with its kind."""
        return IPOAlertModel(**asdict(self), kind=kind)


@dataclass
class IPOAndFPOAlerts:
    """The IPO and FPO lists of one API answer."""

    ipo: list[IPO] = field(default_factory=list)
    fpo: list[IPO] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            ipo=[IPO.from_dict(item) for item in _items(data, "ipo")],
            fpo=[IPO.from_dict(item) for item in _items(data, "fpo")],
        )

    def alerts(self):
        """All issues tagged with their kind, IPOs first."""
        return [issue.to_alert("IPO") for issue in self.ipo] + [
            issue.to_alert("FPO") for issue in self.fpo
        ]


@dataclass
class NepseIndex:
    index_value: float = 0.0
    percent_change: float = 0.0
    difference: float = 0.0
    turnover: float = 0.0
    volume: int = 0
    as_of_date: str = ""


@dataclass
class MarketMover:
    stock_symbol: str = ""
    amount: float = 0.0
    percent_change: float = 0.0


@dataclass
class MarketMovers:
    gainers: list[MarketMover] = field(default_factory=list)
    losers: list[MarketMover] = field(default_factory=list)


@dataclass
class Indices:
    index_name: str = ""
    percent_change: float = 0.0
    difference: float = 0.0


@dataclass
class MarketStatus:
    is_market_open: bool = False


def _nepse_index(data):
    return NepseIndex(
        index_value=_number(data, "index_value"),
        percent_change=_number(data, "percent_change"),
        difference=_number(data, "difference"),
        turnover=_number(data, "turnover"),
        volume=_integer(data, "volume"),
        as_of_date=_text(data, "as_of_date"),
    )


def _market_mover(data):
    return MarketMover(
        stock_symbol=_text(data, "stock_symbol"),
        amount=_number(data, "difference_rs"),
        percent_change=_number(data, "percent_change"),
    )


def _indices(data):
    return Indices(
        index_name=_text(data, "index_name"),
        percent_change=_number(data, "percent_change"),
        difference=_number(data, "difference"),
    )


@dataclass
class MarketSummary:
    """The day's index, top movers, leading sectors and market status."""

    nepse_index: NepseIndex = field(default_factory=NepseIndex)
    market_movers: MarketMovers = field(default_factory=MarketMovers)
    indices: list[Indices] = field(default_factory=list)
    market_status: MarketStatus = field(default_factory=MarketStatus)

    @classmethod
    def from_dict(cls, data):
        """Build from the data object of the market summary query."""
        movers = _mapping(data, "getMarketMovers")
        return cls(
            nepse_index=_nepse_index(_mapping(data, "getNepseIndex")),
            market_movers=MarketMovers(
                gainers=[_market_mover(m) for m in _items(movers, "gainers")],
                losers=[_market_mover(m) for m in _items(movers, "losers")],
            ),
            indices=[_indices(i) for i in _items(data, "getIndices")],
            market_status=MarketStatus(
                is_market_open=_flag(_mapping(data, "getMarketStatus"), "isMarketOpen")
            ),
        )


@dataclass
class CronJobModel:
    """The closing-time details a reminder is scheduled from."""

    unique_symbol: str = ""
    stock_symbol: str = ""
    opening_date_ad: str = ""
    opening_date_bs: str = ""
    closing_date_ad: str = ""
    closing_date_bs: str = ""
    closing_date_closing_time: str = ""
    status: str = ""


@dataclass
class CronJobIpoModel:
    """A stored reminder together with the issue it is for."""

    cron: CronJobModel = field(default_factory=CronJobModel)
    alert: IPOAlertModel = field(default_factory=IPOAlertModel)