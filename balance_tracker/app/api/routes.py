"""HTTP routes for the Flask API."""

import datetime as dt
from http import HTTPStatus
from typing import Any, Tuple

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from balance_tracker.app.state import get_ledger, get_state
from balance_tracker.core.accrual import AccrualResult
from balance_tracker.core.history import build_history
from balance_tracker.core.projection import coerce_month_count, project
from balance_tracker.core.rates import monthly_rate
from balance_tracker.exceptions import AccountNotFoundError, DataSourceError, InvalidQueryError
from balance_tracker.models import Account
from balance_tracker.schemas.accounts import (
    AccountQuery,
    AccountSummary,
    BalanceResponse,
    HistoryResponse,
    HistoryRow,
)
from balance_tracker.schemas.ping import ErrorResponse, PingResponse
from balance_tracker.schemas.projection import (
    ProjectionQuery,
    ProjectionResponse,
    ProjectionRow,
)

LOAD_FAILURE_MESSAGE = "Could not load user data from the data source."

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(InvalidQueryError)
def _handle_invalid_query(exc: InvalidQueryError):
    """Report rejected query parameters as JSON."""
    return jsonify({"detail": exc.errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(AccountNotFoundError)
def _handle_missing_account(exc: AccountNotFoundError):
    return jsonify(ErrorResponse(detail=str(exc)).model_dump()), HTTPStatus.NOT_FOUND


@api_bp.errorhandler(DataSourceError)
def _handle_data_source_error(exc: DataSourceError):
    return jsonify(ErrorResponse(detail=LOAD_FAILURE_MESSAGE).model_dump()), HTTPStatus.SERVICE_UNAVAILABLE


def _cents(amount: float) -> float:
    return round(amount, 2)


def _account_or_404(account_id: int) -> Account:
    account = get_ledger().find(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return account


def _accrual_for(account: Account, as_of: dt.date) -> AccrualResult:
    schedule = get_ledger().schedule_for(account)
    return get_state().cache.get_or_compute(account.id, account.transactions, schedule, as_of)


def _resolve(account_id: int, query_model) -> Tuple[Account, Any, dt.date]:
    try:
        query = query_model.model_validate(request.args.to_dict())
    except ValidationError as exc:
        raise InvalidQueryError(exc.errors(include_url=False, include_context=False)) from exc
    account = _account_or_404(account_id)
    return account, query, query.asOf or dt.date.today()


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong")
    return jsonify(response.model_dump())


@api_bp.get("/accounts")
def list_accounts() -> Any:
    """Accounts available for login, in document order."""
    summaries = [AccountSummary(id=account.id, name=account.name) for account in get_ledger().accounts]
    return jsonify([summary.model_dump() for summary in summaries])


@api_bp.get("/accounts/<int:account_id>/balance")
def balance(account_id: int) -> Any:
    account, _, as_of = _resolve(account_id, AccountQuery)
    result = _accrual_for(account, as_of)

    response = BalanceResponse(
        id=account.id,
        name=account.name,
        asOf=as_of,
        currentBalance=_cents(result.current_balance_with_interest),
        currentRate=result.current_annual_rate,
        totalInterest=_cents(result.total_interest_credited),
        accruedThisMonth=_cents(result.accrued_current_month),
        nextMonthInterest=_cents(result.next_month_estimated_interest),
        baseBalance=_cents(result.base_balance),
        startOfMonthBalance=_cents(result.start_of_current_month_balance),
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/accounts/<int:account_id>/history")
def history(account_id: int) -> Any:
    account, _, as_of = _resolve(account_id, AccountQuery)
    result = _accrual_for(account, as_of)

    entries = build_history(account.transactions, result.posted_interest_transactions)
    response = HistoryResponse(
        id=account.id,
        name=account.name,
        entries=[
            HistoryRow(
                date=entry.date,
                kind=entry.kind.value,
                amount=_cents(entry.amount),
                balance=_cents(entry.balance),
            )
            for entry in entries
        ],
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/accounts/<int:account_id>/projection")
def projection(account_id: int) -> Any:
    """Projection under the rate in effect on asOf, held for the whole horizon."""
    account, query, as_of = _resolve(account_id, ProjectionQuery)
    result = _accrual_for(account, as_of)

    months = coerce_month_count(query.months)
    points = project(result.current_balance_with_interest, result.current_annual_rate, months)

    response = ProjectionResponse(
        id=account.id,
        name=account.name,
        startingBalance=_cents(result.current_balance_with_interest),
        annualRate=result.current_annual_rate,
        monthlyRate=monthly_rate(result.current_annual_rate),
        months=months,
        points=[ProjectionRow(month=point.month, balance=_cents(point.balance)) for point in points],
    )
    return jsonify(response.model_dump(mode="json"))
