from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from balance_tracker.app import create_app
from balance_tracker.data.loader import parse_bank_xml
from balance_tracker.models import Ledger

BANK_XML = """<?xml version="1.0" encoding="UTF-8"?>
<bank>
  <interestRates>
    <interestRate><start>2000-01-01</start><end>2099-12-31</end><rate>12</rate></interestRate>
  </interestRates>
  <user>
    <name>Alice</name>
    <transactions>
      <transaction><date>2025-01-01</date><type>Deposit</type><amount>1000</amount></transaction>
    </transactions>
  </user>
  <user>
    <name>Bob</name>
    <transactions>
      <transaction><date>2025-01-05</date><type>Withdrawal</type><amount>50</amount></transaction>
      <transaction><date>2025-02-01</date><type>debit</type><amount>20</amount></transaction>
    </transactions>
  </user>
  <user>
    <name>Cara</name>
    <transactions>
      <transaction><date>2025-01-01</date><type>Deposit</type><amount>500</amount></transaction>
    </transactions>
    <interestRates>
      <interestRate><start>2025-01-01</start><end>2025-12-31</end><rate>0</rate></interestRate>
    </interestRates>
  </user>
</bank>
"""


@pytest.fixture()
def ledger() -> Ledger:
    return parse_bank_xml(BANK_XML)


@pytest.fixture()
def app(ledger: Ledger) -> Flask:
    return create_app(ledger=ledger)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
