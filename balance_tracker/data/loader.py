"""Bank document loading: fetch once, normalize into a Ledger."""

from __future__ import annotations

import datetime as dt
import logging
import math
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import ValidationError

from balance_tracker.exceptions import DataSourceError
from balance_tracker.models import Account, Ledger, RateInterval, Transaction, TransactionKind

logger = logging.getLogger(__name__)


def _text(node: ET.Element, tag: str) -> Optional[str]:
    child = node.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _number(raw: Optional[str]) -> float:
    """Numeric field value; missing or non-numeric text counts as 0."""
    try:
        value = float(raw) if raw else 0.0
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _calendar_date(raw: Optional[str]) -> Optional[dt.date]:
    try:
        return dt.date.fromisoformat(raw or "")
    except ValueError:
        return None


def _parse_rates(container: Optional[ET.Element], owner: str) -> List[RateInterval]:
    if container is None:
        return []

    rates: List[RateInterval] = []
    for node in container.findall("interestRate"):
        start = _calendar_date(_text(node, "start"))
        end = _calendar_date(_text(node, "end"))
        if start is None or end is None:
            logger.warning("dropping interest rate with bad dates", extra={"owner": owner})
            continue
        try:
            rates.append(RateInterval(start_date=start, end_date=end, annual_rate=_number(_text(node, "rate"))))
        except ValidationError:
            logger.warning(
                "dropping invalid interest rate interval",
                extra={"owner": owner, "start": start.isoformat(), "end": end.isoformat()},
            )
    return rates


def _parse_transactions(user: ET.Element, owner: str) -> List[Transaction]:
    transactions: List[Transaction] = []
    for node in user.findall("transactions/transaction"):
        day = _calendar_date(_text(node, "date"))
        raw_kind = _text(node, "type") or ""
        kind = TransactionKind.parse(raw_kind)
        if day is None or kind is None:
            logger.warning(
                "dropping malformed transaction",
                extra={"owner": owner, "date": _text(node, "date"), "type": raw_kind},
            )
            continue
        try:
            transactions.append(Transaction(date=day, kind=kind, amount=_number(_text(node, "amount"))))
        except ValidationError:
            logger.warning("dropping transaction with negative amount", extra={"owner": owner})
    return transactions


def parse_bank_xml(document: str) -> Ledger:
    """
    Parse a bank document into a Ledger.

    Only a root-level <interestRates> block is global (the first one wins);
    per-user blocks live under each <user>. Users without a <name> are
    called "User N", numbered from 1.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise DataSourceError(f"invalid bank document: {exc}") from exc

    global_rates = _parse_rates(root.find("interestRates"), owner="global")

    accounts: List[Account] = []
    for index, user in enumerate(root.iter("user")):
        name = _text(user, "name") or f"User {index + 1}"
        accounts.append(
            Account(
                id=index,
                name=name,
                transactions=_parse_transactions(user, name),
                interest_rates=_parse_rates(user.find("interestRates"), name),
            )
        )

    return Ledger(accounts=accounts, global_rates=global_rates)


def fetch_document(source: str, timeout: float = 5.0) -> str:
    """
    Read the bank document from an http(s) URL or a local path.

    Raises:
        DataSourceError: On transport errors, HTTP errors or unreadable files
    """
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise DataSourceError(f"bank document fetch timed out after {timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise DataSourceError(f"bank document fetch failed: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DataSourceError(f"bank document fetch failed: {exc}") from exc
        return response.text

    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise DataSourceError(f"cannot read bank document {source}: {exc}") from exc


def load_ledger(source: str, timeout: float = 5.0) -> Ledger:
    ledger = parse_bank_xml(fetch_document(source, timeout=timeout))
    logger.info(
        "bank document loaded",
        extra={"source": source, "accounts": len(ledger.accounts), "global_rates": len(ledger.global_rates)},
    )
    return ledger
