from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import httpx
import pytest

from balance_tracker.data import loader
from balance_tracker.data.loader import fetch_document, load_ledger, parse_bank_xml
from balance_tracker.exceptions import DataSourceError
from balance_tracker.models import TransactionKind

MESSY_XML = """
<bank>
  <interestRates>
    <interestRate><start>2025-01-01</start><end>2025-12-31</end><rate>4.5</rate></interestRate>
    <interestRate><start>2026-01-01</start><end>2025-01-01</end><rate>3</rate></interestRate>
  </interestRates>
  <user>
    <name>Nia</name>
    <transactions>
      <transaction><date>2025-01-02</date><type>DEPOSIT</type><amount>abc</amount></transaction>
      <transaction><date>2025-01-03</date><type>Debit</type><amount>12.5</amount></transaction>
      <transaction><date>01/04/2025</date><type>deposit</type><amount>10</amount></transaction>
      <transaction><date>2025-01-05</date><type>transfer</type><amount>10</amount></transaction>
      <transaction><date>2025-01-06</date><type>withdrawal</type><amount>-4</amount></transaction>
      <transaction><date>2025-01-07</date><type>Interest</type></transaction>
    </transactions>
    <interestRates>
      <interestRate><start>2025-01-01</start><end>2025-06-30</end><rate>not-a-rate</rate></interestRate>
      <interestRate><start>someday</start><end>2025-06-30</end><rate>2</rate></interestRate>
    </interestRates>
  </user>
  <user>
    <transactions>
      <transaction><date>2025-02-01</date><type>deposit</type><amount>7</amount></transaction>
    </transactions>
  </user>
</bank>
"""


def test_global_rates_are_normalized_and_bad_intervals_dropped():
    ledger = parse_bank_xml(MESSY_XML)

    assert len(ledger.global_rates) == 1
    assert ledger.global_rates[0].annual_rate == pytest.approx(0.045)


def test_transactions_are_coerced_or_dropped(caplog):
    with caplog.at_level(logging.WARNING, logger="balance_tracker.data.loader"):
        ledger = parse_bank_xml(MESSY_XML)

    nia = ledger.accounts[0]
    assert nia.name == "Nia"
    assert [(t.date, t.kind, t.amount) for t in nia.transactions] == [
        (date(2025, 1, 2), TransactionKind.DEPOSIT, 0.0),
        (date(2025, 1, 3), TransactionKind.WITHDRAWAL, 12.5),
        (date(2025, 1, 7), TransactionKind.INTEREST, 0.0),
    ]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) >= 4


def test_user_rates_stay_with_the_user():
    ledger = parse_bank_xml(MESSY_XML)
    nia, unnamed = ledger.accounts

    assert len(nia.interest_rates) == 1
    assert nia.interest_rates[0].annual_rate == 0.0
    assert ledger.schedule_for(nia) == nia.interest_rates
    # an account without its own schedule uses the global one
    assert ledger.schedule_for(unnamed) == ledger.global_rates


def test_unnamed_user_gets_positional_name_and_id():
    ledger = parse_bank_xml(MESSY_XML)

    assert ledger.accounts[1].name == "User 2"
    assert ledger.accounts[1].id == 1
    assert ledger.find(1) is ledger.accounts[1]
    assert ledger.find(5) is None


def test_document_without_rates_or_users():
    ledger = parse_bank_xml("<bank/>")
    assert ledger.accounts == []
    assert ledger.global_rates == []


def test_invalid_xml_raises_data_source_error():
    with pytest.raises(DataSourceError):
        parse_bank_xml("<bank><user>")


def test_fetch_local_file(tmp_path: Path):
    path = tmp_path / "bank.xml"
    path.write_text("<bank><user><name>Ola</name></user></bank>", encoding="utf-8")

    ledger = load_ledger(str(path))
    assert [a.name for a in ledger.accounts] == ["Ola"]


def test_fetch_missing_file_raises(tmp_path: Path):
    with pytest.raises(DataSourceError):
        fetch_document(str(tmp_path / "missing.xml"))


def test_fetch_over_http(monkeypatch):
    url = "https://example.test/bank.xml"

    def fake_get(requested_url, timeout, follow_redirects):
        assert requested_url == url
        return httpx.Response(200, text="<bank/>", request=httpx.Request("GET", requested_url))

    monkeypatch.setattr(loader.httpx, "get", fake_get)
    assert fetch_document(url, timeout=1.0) == "<bank/>"


def test_fetch_http_error_raises(monkeypatch):
    def fake_get(requested_url, timeout, follow_redirects):
        return httpx.Response(500, request=httpx.Request("GET", requested_url))

    monkeypatch.setattr(loader.httpx, "get", fake_get)
    with pytest.raises(DataSourceError, match="500"):
        fetch_document("http://example.test/bank.xml")


def test_fetch_timeout_raises(monkeypatch):
    def fake_get(requested_url, timeout, follow_redirects):
        raise httpx.ConnectTimeout("too slow")

    monkeypatch.setattr(loader.httpx, "get", fake_get)
    with pytest.raises(DataSourceError, match="timed out"):
        fetch_document("http://example.test/bank.xml", timeout=0.5)


def test_rates_below_minus_one_are_dropped(caplog):
    document = """
    <bank>
      <interestRates>
        <interestRate><start>2025-01-01</start><end>2025-06-30</end><rate>-2</rate></interestRate>
        <interestRate><start>2025-07-01</start><end>2025-12-31</end><rate>-1</rate></interestRate>
      </interestRates>
      <user>
        <name>Ivo</name>
        <interestRates>
          <interestRate><start>2025-01-01</start><end>2025-12-31</end><rate>-150</rate></interestRate>
        </interestRates>
      </user>
    </bank>
    """
    with caplog.at_level(logging.WARNING, logger="balance_tracker.data.loader"):
        ledger = parse_bank_xml(document)

    assert [r.annual_rate for r in ledger.global_rates] == [-1.0]
    assert ledger.accounts[0].interest_rates == []
    assert any("invalid interest rate" in r.getMessage() for r in caplog.records)
