# nepsenavigator

A library for working with Nepal Stock Exchange (NEPSE) market data:

- `nepsenavigator.numbers`: lakh / crore / arab wording of large amounts, word
  capitalisation, and unique issue symbols such as `ABC_ORD`.
- `nepsenavigator.dates`: AD (Gregorian) and BS (Nepali) dates rendered for messages.
- `nepsenavigator.models`: dataclasses for IPO/FPO issues and the market summary.
- `nepsenavigator.messages`: Markdown texts announcing an issue and reminding of its close.
- `nepsenavigator.oversubscription`: oversubscription ratios read from an HTML table of issues.
- `nepsenavigator.graphql_client`: a small GraphQL client and the IPO/FPO and market summary queries.
- `nepsenavigator.ipostore`: a SQLAlchemy store of announced issues and closing reminders.
- `nepsenavigator.records` and `nepsenavigator.resolvers`: market documents and the answers
  to market queries (movers, indices, NEPSE index, stocks, IPO/FPO lists, market status).
- `nepsenavigator.applog`: levelled logging to a file and a coloured console.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Number wording:

```python
from nepsenavigator.numbers import number_to_crore_arab, number_to_crore_arab_full, generate_unique_symbol

number_to_crore_arab(2_500_000_000)       # "2 arab, 50 crore+"
number_to_crore_arab_full(1_500_000)      # "1500000.00"
generate_unique_symbol("Ordinary", "ABC") # "ABC_ORD"
```

Dates:

```python
from nepsenavigator.dates import convert_date, bs_date_convert

convert_date("2025-01-20", "2081-10-07")  # "Magh 7 ( Jan 20 )"
bs_date_convert("2081-10-15")             # "15 Magh 2081"
```

`parse_nepali_date` and `parse_english_month` raise `DateFormatError` for text that is
not `YYYY-MM-DD` or is out of range; `convert_date` leaves such a part empty.

Fetching IPO and FPO issues and formatting messages:

```python
from nepsenavigator.graphql_client import GraphQLClient, get_ipo_fpo_details, market_summary
from nepsenavigator.messages import format_ipo_message

client = GraphQLClient("http://localhost:8080/query")
ipos, fpos = get_ipo_fpo_details(client)
for issue in ipos:
    print(format_ipo_message(issue.to_alert("IPO")))

summary = market_summary(client)
print(summary.nepse_index.index_value, summary.market_status.is_market_open)
```

Failed requests and GraphQL errors raise `GraphQLError`.
`format_ipo_alert_message(alert, oversubscription)` builds the closing reminder; when
`oversubscription` is `None` it calls `get_ipo_oversubscription`, which downloads the
page named by the `API_URL` environment variable (or the `api_url` argument) and returns
the ratio as `"N.NN"`, or `""` when it cannot be found.

Tracking announced issues:

```python
from nepsenavigator.ipostore import IPOStore, NepseData

with IPOStore("sqlite:///nepse.db") as store:
    if store.check_and_update_ipo_status("ABC_ORD", "Open"):
        store.create_or_update(NepseData(unique_symbol="ABC_ORD", status="Open", kind="IPO"))
    open_ipos = store.read("Open", "IPO")
```

`IPOStore` also offers `update_status`, `delete_ipo` (a soft delete), `store_cron` and
`read_cron` for closing reminders. Database failures raise `StoreError`.

Resolving market queries:

```python
from nepsenavigator.resolvers import QueryResolver

resolver = QueryResolver(database)   # e.g. a pymongo Database
movers = resolver.get_market_movers(5)
top_indices = resolver.get_indices(3)
status = resolver.get_market_status()
```

`database` is indexed by collection name (`marketmovers`, `nepse-data`, `market-data`,
`indices-data`, `ipo-fpo`, `market-status`); each collection must offer `find_one(filter)`
and `find(filter)`. Failures raise `ResolverError`.

Logging: call `applog.init_logger("app.log", LogLevel.INFO)`, then
`applog.log(LogLevel.INFO, "fetched %d rows", count)`, and `applog.close_logger()` when done.

## What the package does not do

It is a library only. It has no command to run, no Telegram bot, no scheduler of
periodic jobs or reminders, no HTTP or GraphQL server (the resolvers answer queries
but nothing serves them), does not collect market data from the exchange into the
document database, and does not render images for messages.