"""Queries against the market data GraphQL API."""

from __future__ import annotations

import requests

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel
from nepsenavigator.models import IPOAndFPOAlerts, MarketSummary

_ISSUE_FIELDS = """
                    unique_symbol
                    company_name
                    stock_symbol
                    share_registrar
                    sector_name
                    share_type
                    price_per_unit
                    rating
                    units
                    min_units
                    max_units
                    total_amount
                    opening_date_ad
                    opening_date_bs
                    closing_date_ad
                    closing_date_bs
                    closing_date_closing_time
                    status
"""

IPO_FPO_QUERY = f"""
        query {{
            getIPOAndFpoAlerts {{
                ipo {{{_ISSUE_FIELDS}                }}
                fpo {{{_ISSUE_FIELDS}                }}
            }}
        }}
"""

MARKET_SUMMARY_QUERY = """
  query {
    getMarketStatus {
      isMarketOpen
    }
    getNepseIndex {
      index_value
      percent_change
      difference
      turnover
      volume
      as_of_date
    }
    getMarketMovers(top: 5) {
      gainers {
        stock_symbol
        difference_rs
        percent_change
      }
      losers {
        stock_symbol
        difference_rs
        percent_change
      }
    }
    getIndices(top: 3) {
      index_name
      percent_change
      difference
    }
  }
"""


class GraphQLError(Exception):
    """A GraphQL request failed or its answer could not be read."""


class GraphQLClient:
    """Posts queries to one GraphQL endpoint."""

    def __init__(self, url, session=None):
        self.url = url
        self._session = session if session is not None else requests.Session()

    def run(self, query):
        """Run query and return the answer's data object."""
        try:
            response = self._session.post(
                self.url,
                json={"query": query},
                headers={"Accept": "application/json; charset=utf-8"},
                timeout=60,
            )
        except requests.RequestException as exc:
            raise GraphQLError(f"graphql: request failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            if response.status_code != 200:
                raise GraphQLError(
                    "graphql: server returned a non-200 status code: "
                    f"{response.status_code}"
                ) from exc
            raise GraphQLError(f"decoding response: {exc}") from exc
        if not isinstance(payload, dict):
            raise GraphQLError("decoding response: expected a JSON object")
        errors = payload.get("errors") or []
        if errors:
            first = errors[0]
            message = first.get("message", "") if isinstance(first, dict) else str(first)
            raise GraphQLError(f"graphql: {message}")
        data = payload.get("data")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise GraphQLError("decoding response: data is not an object")
        return data


def get_ipo_fpo_details(client):
    """Fetch the current IPO and FPO issues as two lists."""
    applog.log(LogLevel.INFO, "Sending GraphQL request to fetch IPO and FPO details")
    try:
        data = client.run(IPO_FPO_QUERY)
    except GraphQLError as exc:
        applog.log(LogLevel.ERROR, "Failed to fetch IPO and FPO details: %s", exc)
        raise
    try:
        alerts = IPOAndFPOAlerts.from_dict(data.get("getIPOAndFpoAlerts") or {})
    except (TypeError, AttributeError) as exc:
        applog.log(LogLevel.ERROR, "Failed to fetch IPO and FPO details: %s", exc)
        raise GraphQLError(f"decoding response: {exc}") from exc
    applog.log(LogLevel.INFO, "Successfully fetched IPO and FPO details")
    return alerts.ipo, alerts.fpo


def market_summary(client):
    """Fetch the day's market summary."""
    applog.log(LogLevel.INFO, "Starting MarketSummary function")
    applog.log(LogLevel.DEBUG, "Sending GraphQL request")
    try:
        summary = MarketSummary.from_dict(client.run(MARKET_SUMMARY_QUERY))
    except (GraphQLError, TypeError, AttributeError) as exc:
        applog.log(LogLevel.ERROR, "Error in getting the file: %s", exc)
        raise GraphQLError(f"error in getting the file {exc}") from exc
    applog.log(LogLevel.INFO, "Successfully retrieved market summary data")
    return summary