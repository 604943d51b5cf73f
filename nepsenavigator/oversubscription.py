"""Oversubscription figures scraped from a published table of share issues."""

from __future__ import annotations

import os
from dataclasses import dataclass
from html.parser import HTMLParser

import requests

from nepsenavigator import applog
from nepsenavigator.applog import LogLevel

_ROW_WIDTH = 10
_CELL_FIELDS = {
    1: "company_name",
    2: "issue_manager",
    3: "issued_unit",
    4: "num_applications",
    5: "applied_unit",
    6: "amount",
    7: "open_date",
    8: "close_date",
}
_VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
_CELL_BOUNDARIES = frozenset({"td", "th", "tr", "thead", "tbody", "tfoot", "table"})
_SECTION_HEADS = frozenset({"thead", "tfoot"})


@dataclass
class CompanyIssue:
    """One row of the issue table."""

    company_name: str = ""
    issue_manager: str = ""
    issued_unit: str = ""
    num_applications: str = ""
    applied_unit: str = ""
    amount: str = ""
    open_date: str = ""
    close_date: str = ""


class _IssueTableParser(HTMLParser):
    """Collects body cells of tables, ten cells to a company."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.companies: list[CompanyIssue] = []
        self._current = CompanyIssue()
        self._cells = 0
        self._tables = 0
        self._heads = 0
        self._in_cell = False
        self._cell_depth = 0
        self._cell_text: str | None = None

    def handle_starttag(self, tag, attrs):
        if tag in _CELL_BOUNDARIES:
            self.finish_cell()
        if tag == "table":
            self._tables += 1
        elif tag in _SECTION_HEADS:
            self._heads += 1
        if tag == "td" and self._tables and not self._heads:
            self._in_cell = True
            self._cell_depth = 0
            self._cell_text = None
            return
        if self._in_cell and tag not in _VOID_ELEMENTS:
            self._cell_depth += 1

    def handle_endtag(self, tag):
        if tag in _CELL_BOUNDARIES:
            self.finish_cell()
            if tag == "table":
                self._tables = max(0, self._tables - 1)
            elif tag in _SECTION_HEADS:
                self._heads = max(0, self._heads - 1)
        elif self._in_cell and tag not in _VOID_ELEMENTS:
            self._cell_depth = max(0, self._cell_depth - 1)

    def handle_data(self, data):
        if self._in_cell and self._cell_depth == 0 and self._cell_text is None:
            self._cell_text = data

    def finish_cell(self):
        if not self._in_cell:
            return
        self._in_cell = False
        text = (self._cell_text or "").strip()
        name = _CELL_FIELDS.get(self._cells)
        if name is not None:
            setattr(self._current, name, text)
        self._cells += 1
        if self._cells == _ROW_WIDTH:
            self.companies.append(self._current)
            self._current = CompanyIssue()
            self._cells = 0


def extract_table_data(html_text):
    """Read every complete ten-cell row of table bodies in html_text."""
    parser = _IssueTableParser()
    parser.feed(html_text)
    parser.close()
    parser.finish_cell()
    return parser.companies


def _units(text, what):
    try:
        return float(text.replace(",", ""))
    except ValueError:
        raise ValueError(f"invalid {what} units: {text!r}") from None


def oversubscription_ratio(companies, symbol):
    """Applied over issued units for the first company naming symbol, or ''."""
    for company in companies:
        if symbol in company.company_name:
            issued = _units(company.issued_unit, "issued")
            applied = _units(company.applied_unit, "applied")
            if issued == 0:
                raise ValueError(f"issued units of {company.company_name!r} is zero")
            return f"{applied / issued:.2f}"
    return ""


def fetch_issue_page(api_url):
    """Download the issue table page."""
    response = requests.get(api_url, timeout=30)
    return response.text


def get_ipo_oversubscription(symbol, api_url=None):
    """Oversubscription of symbol as 'N.NN', or '' when it cannot be found."""
    if api_url is None:
        api_url = os.environ.get("API_URL", "")
    try:
        page = fetch_issue_page(api_url)
    except requests.RequestException as exc:
        applog.log(LogLevel.ERROR, "Failed to fetch data: %s", exc)
        return ""
    companies = extract_table_data(page)
    try:
        return oversubscription_ratio(companies, symbol)
    except ValueError as exc:
        applog.log(LogLevel.ERROR, "Error converting units: %s", exc)
        return ""