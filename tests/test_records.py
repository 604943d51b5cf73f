import pytest

from nepsenavigator.records import (
    IndicesRecord,
    IPOAlertRecord,
    IPOAndFpoAlertRecord,
    MarketMoverRecord,
    MarketMoversRecord,
    MarketRecord,
    MarketStatusRecord,
    NepseIndexRecord,
)

MOVER = {
    "stock_code": "NABIL",
    "company": "Nabil Bank",
    "transactions_count": 120,
    "highest_price": 510.5,
    "lowest_price": 490,
    "opening_price": 495.0,
    "closing_price": 505.0,
    "turnover": 1234567.0,
    "previous_close": 480.0,
    "price_change": 25.0,
    "percentage_change": 5.2,
    "traded_volume": 3000,
    "trade_date": "2025-01-20",
}


def test_market_mover_reads_bson_keys():
    record = MarketMoverRecord.from_document(MOVER)
    assert record.stock_code == "NABIL"
    assert record.company == "Nabil Bank"
    assert record.transactions_count == 120
    assert record.percentage_change == 5.2
    assert record.trade_date == "2025-01-20"


def test_integer_number_becomes_float():
    record = MarketMoverRecord.from_document(MOVER)
    assert record.lowest_price == 490.0
    assert isinstance(record.lowest_price, float)


def test_missing_fields_take_defaults():
    assert MarketMoverRecord.from_document({}) == MarketMoverRecord()
    assert MarketMoverRecord().stock_code == ""


def test_null_fields_take_defaults():
    record = NepseIndexRecord.from_document({"market_index": None, "current_value": None})
    assert record == NepseIndexRecord()


def test_extra_keys_are_ignored():
    record = MarketRecord.from_document({"_id": "abc", "symbol": "NICA"})
    assert record.symbol == "NICA"
    assert record.high == 0.0


def test_wrong_string_type_raises():
    with pytest.raises(TypeError):
        MarketMoverRecord.from_document({"stock_code": 12})


def test_bool_is_not_an_integer():
    with pytest.raises(TypeError):
        MarketRecord.from_document({"trade_volume": True})


def test_text_is_not_a_number():
    with pytest.raises(TypeError):
        IndicesRecord.from_document({"index_value": "1000"})


def test_non_mapping_document_raises():
    with pytest.raises(TypeError):
        MarketStatusRecord.from_document(["OPEN"])


def test_market_movers_nested_lists():
    record = MarketMoversRecord.from_document({"gainers": [MOVER], "losers": None})
    assert record.gainers == [MarketMoverRecord.from_document(MOVER)]
    assert record.losers == []


def test_market_movers_list_type_checked():
    with pytest.raises(TypeError):
        MarketMoversRecord.from_document({"gainers": "NABIL"})


def test_ipo_and_fpo_alerts():
    ipo = {"unique_symbol": "ABC_ORD", "stock_symbol": "ABC", "status": "Open"}
    fpo = {"unique_symbol": "XYZ_LO", "stock_symbol": "XYZ", "status": "Closed"}
    record = IPOAndFpoAlertRecord.from_document({"ipo": [ipo], "fpo": [fpo]})
    assert [alert.unique_symbol for alert in record.ipo] == ["ABC_ORD"]
    assert record.fpo[0] == IPOAlertRecord.from_document(fpo)
    assert record.fpo[0].status == "Closed"


def test_indices_keeps_large_listed_shares():
    shares = 9_876_543_210
    record = IndicesRecord.from_document({"index_name": "Banking", "listed_shares": shares})
    assert record.listed_shares == shares
    assert record.index_name == "Banking"


def test_market_status_reads_is_open_key():
    assert MarketStatusRecord.from_document({"isOpen": "OPEN"}).is_open == "OPEN"
    assert MarketStatusRecord.from_document({"is_open": "OPEN"}).is_open == ""