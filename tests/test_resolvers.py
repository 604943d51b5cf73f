import pytest

from nepsenavigator.records import IPOAlertRecord, MarketMoverRecord
from nepsenavigator.resolvers import (
    QueryResolver,
    ResolverError,
    map_ipo_alerts,
    map_market_movers,
)


class FakeCursor:
    def __init__(self, documents, fail=False):
        self._documents = documents
        self._fail = fail
        self.closed = False

    def __iter__(self):
        if self._fail:
            raise RuntimeError("cursor broke")
        return iter(self._documents)

    def close(self):
        self.closed = True


class FakeCollection:
    def __init__(self, documents=(), fail_cursor=False):
        self.documents = list(documents)
        self.fail_cursor = fail_cursor
        self.cursor = None

    def find_one(self, query):
        for document in self.documents:
            if all(document.get(key) == value for key, value in query.items()):
                return document
        return None

    def find(self, query):
        self.cursor = FakeCursor(self.documents, self.fail_cursor)
        return self.cursor


class BrokenCollection:
    def find_one(self, query):
        raise RuntimeError("connection refused")

    def find(self, query):
        raise RuntimeError("connection refused")


def mover(symbol, change):
    return {"stock_code": symbol, "company": symbol + " Ltd", "percentage_change": change}


def movers_db(gainers, losers):
    return QueryResolver(
        {"marketmovers": FakeCollection([{"gainers": gainers, "losers": losers}])}
    )


def test_map_market_movers_sorts_highest_first():
    records = [MarketMoverRecord.from_document(mover(s, c)) for s, c in
               [("A", 1.0), ("B", 9.0), ("C", 4.0)]]
    result = map_market_movers(records, 3)
    assert [r.stock_symbol for r in result] == ["B", "C", "A"]


def test_map_market_movers_default_top_is_five():
    records = [MarketMoverRecord.from_document(mover(str(i), float(i))) for i in range(8)]
    result = map_market_movers(records, 0)
    assert len(result) == 5
    assert [r.percent_change for r in result] == sorted(
        (r.percentage_change for r in records), reverse=True
    )[:5]


def test_map_market_movers_keeps_all_when_fewer_than_top():
    records = [MarketMoverRecord.from_document(mover("A", 2.0))]
    result = map_market_movers(records, 4)
    assert [r.company_name for r in result] == ["A Ltd"]


def test_map_ipo_alerts_copies_fields():
    alert = IPOAlertRecord.from_document(
        {"unique_symbol": "ABC_ORD", "company_name": "ABC", "status": "Open",
         "closing_date_closing_time": "5:00 PM"}
    )
    result = map_ipo_alerts([alert])
    assert result[0].unique_symbol == "ABC_ORD"
    assert result[0].closing_date_closing_time == "5:00 PM"
    assert map_ipo_alerts([]) == []


def test_get_market_movers_maps_and_cuts():
    gainers = [mover("G1", 3.0), mover("G2", 7.0), mover("G3", 5.0)]
    losers = [mover("L1", -2.0), mover("L2", -6.0), mover("L3", -1.0)]
    result = movers_db(gainers, losers).get_market_movers(2)
    assert [m.stock_symbol for m in result.gainers] == ["G2", "G3"]
    assert [m.stock_symbol for m in result.losers] == ["L3", "L1"]


def test_get_market_movers_top_too_large():
    resolver = movers_db([mover("G1", 1.0)] * 3, [mover("L1", -1.0)])
    with pytest.raises(ResolverError, match="requested top 2 is greater"):
        resolver.get_market_movers(2)


def test_get_market_movers_without_document():
    resolver = QueryResolver({"marketmovers": FakeCollection()})
    with pytest.raises(ResolverError, match="failed to fetch market movers"):
        resolver.get_market_movers(1)


def test_get_market_movers_database_error():
    resolver = QueryResolver({"marketmovers": BrokenCollection()})
    with pytest.raises(ResolverError, match="connection refused"):
        resolver.get_market_movers(1)


def test_get_nepse_index_maps_fields():
    document = {"market_index": "NEPSE Index", "current_value": 2700.5,
                "point_change": -12.25, "traded_volume": 9000, "date": "2025-01-20T15:00:00"}
    result = QueryResolver({"nepse-data": FakeCollection([document])}).get_nepse_index()
    assert result.index_name == "NEPSE Index"
    assert result.index_value == 2700.5
    assert result.difference == -12.25
    assert result.volume == 9000
    assert result.as_of_date == "2025-01-20T15:00:00"


def test_get_nepse_index_decode_error():
    resolver = QueryResolver({"nepse-data": FakeCollection([{"current_value": "x"}])})
    with pytest.raises(ResolverError, match="failed to fetch nepse index"):
        resolver.get_nepse_index()


def test_get_markets_keeps_order_and_closes_cursor():
    collection = FakeCollection([
        {"symbol": "NICA", "last_updated": "2025-01-20"},
        {"symbol": "NABIL", "close": 505.0},
    ])
    result = QueryResolver({"market-data": collection}).get_markets()
    assert [m.symbol for m in result] == ["NICA", "NABIL"]
    assert result[0].lastupdated == "2025-01-20"
    assert result[1].close == 505.0
    assert collection.cursor.closed


def test_get_markets_empty():
    assert QueryResolver({"market-data": FakeCollection()}).get_markets() == []


def test_get_markets_decode_error():
    resolver = QueryResolver({"market-data": FakeCollection([{"symbol": 5}])})
    with pytest.raises(ResolverError, match="failed to decode market"):
        resolver.get_markets()


def test_get_markets_cursor_error():
    resolver = QueryResolver({"market-data": FakeCollection([{}], fail_cursor=True)})
    with pytest.raises(ResolverError, match="cursor error"):
        resolver.get_markets()


def test_get_markets_find_error():
    resolver = QueryResolver({"market-data": BrokenCollection()})
    with pytest.raises(ResolverError, match="failed to fetch markets"):
        resolver.get_markets()


def test_get_indices_sorted_and_cut():
    documents = [{"index_name": n, "percent_change": c}
                 for n, c in [("Banking", 0.5), ("Hydro", 2.5), ("Finance", 1.5)]]
    result = QueryResolver({"indices-data": FakeCollection(documents)}).get_indices(2)
    assert [i.index_name for i in result] == ["Hydro", "Finance"]


def test_get_indices_top_too_large():
    documents = [{"index_name": "Banking"}, {"index_name": "Hydro"}]
    resolver = QueryResolver({"indices-data": FakeCollection(documents)})
    with pytest.raises(ResolverError, match=f"only {len(documents)} indices available"):
        resolver.get_indices(len(documents) + 1)


def test_get_indices_maps_counts_and_wraps_listed_shares():
    shares = 2**31 + 5
    document = {"index_name": "Banking", "total_companies": 30, "gaining_companies": 12,
                "listed_shares": shares, "report_date_string": "As of Jan 20"}
    result = QueryResolver({"indices-data": FakeCollection([document])}).get_indices(1)
    assert result[0].no_of_listed_companies == 30
    assert result[0].no_of_gainers == 12
    assert result[0].as_of_date_string == "As of Jan 20"
    assert result[0].no_of_listed_shares == shares - 2**32


def test_get_ipo_and_fpo_alerts():
    document = {"ipo": [{"unique_symbol": "ABC_ORD"}], "fpo": None}
    result = QueryResolver({"ipo-fpo": FakeCollection([document])}).get_ipo_and_fpo_alerts()
    assert [a.unique_symbol for a in result.ipo] == ["ABC_ORD"]
    assert result.fpo == []


def test_get_ipo_and_fpo_alerts_missing():
    resolver = QueryResolver({"ipo-fpo": FakeCollection()})
    with pytest.raises(ResolverError, match="failed to fetch IPO and FPO alerts"):
        resolver.get_ipo_and_fpo_alerts()


def test_get_market_by_symbol():
    collection = FakeCollection([{"symbol": "NICA", "high": 900.0},
                                 {"symbol": "NABIL", "high": 510.0}])
    result = QueryResolver({"market-data": collection}).get_market_by_symbol("NABIL")
    assert result.symbol == "NABIL"
    assert result.high == 510.0


def test_get_market_by_symbol_unknown():
    resolver = QueryResolver({"market-data": FakeCollection([{"symbol": "NICA"}])})
    with pytest.raises(ResolverError, match="failed to fetch market by symbol"):
        resolver.get_market_by_symbol("ZZZ")


@pytest.mark.parametrize(
    "word, expected",
    [("OPEN", True), ("open", True), ("Open", True), ("CLOSE", False), ("", False)],
)
def test_get_market_status(word, expected):
    resolver = QueryResolver({"market-status": FakeCollection([{"isOpen": word}])})
    assert resolver.get_market_status().is_market_open is expected


def test_get_market_status_missing():
    resolver = QueryResolver({"market-status": FakeCollection()})
    with pytest.raises(ResolverError) as info:
        resolver.get_market_status()
    assert str(info.value) == "cannot retrieve market status"