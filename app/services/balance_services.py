import logging
from decimal import Decimal
from typing import Any, Iterable

from app.core.utils import ZERO, BalanceMap
from app.schemas.balance import BalanceSummary
from app.schemas.expense import ExpenseRecord, PaymentRecord
from app.services.record_services import load_records

logger = logging.getLogger(__name__)

def _fold_expense(balances: BalanceMap, expense: ExpenseRecord, user_id: str):
    if expense.payer_id == user_id:
        for share in expense.shares:
            if share.participant_id != user_id:
                balances.add(share.participant_id, share.amount)
        return

    user_share = expense.share_of(user_id)
    if user_share is not None:
        balances.add(expense.payer_id, -user_share)
    # neither payer nor share holder: observer, contributes nothing

def _fold_payment(balances: BalanceMap, payment: PaymentRecord, user_id: str):
    if payment.payer_id == user_id:
        balances.add(payment.receiver_id, payment.amount)
    elif payment.receiver_id == user_id:
        balances.add(payment.payer_id, -payment.amount)

def get_balances(records: Iterable[Any], user_id: str) -> BalanceSummary:
    """Net signed balance between ``user_id`` and every counterparty.

    Positive entries mean the counterparty owes the user; negative entries
    mean the user owes the counterparty. Expenses and settlements share one
    accumulator per counterparty.

    ``records`` may hold loaded records or raw documents; the whole snapshot
    is validated before anything is folded, so a malformed record raises
    ``DataIntegrityError`` instead of being skipped. Records are folded in id
    order, which makes the result independent of input order.
    """
    snapshot = load_records(records)

    balances = BalanceMap()
    for record in sorted(snapshot, key=lambda r: r.id):
        if record.is_payment:
            _fold_payment(balances, record, user_id)
        else:
            _fold_expense(balances, record, user_id)

    owed, owes = balances.totals()

    logger.debug(
        "Folded %d records for %s: %d counterparties, owed %s, owes %s",
        len(snapshot), user_id, len(balances), owed, owes,
    )

    return BalanceSummary(
        user_id=user_id,
        balances=dict(balances),
        total_owed_to_user=owed,
        total_user_owes=owes,
    )

def get_group_balances(records: Iterable[Any], user_id: str, group_id: str) -> BalanceSummary:
    snapshot = load_records(records)
    return get_balances(
        [r for r in snapshot if r.group_id == group_id],
        user_id,
    )

def get_counterparty_balance(records: Iterable[Any], user_id: str, counterparty_id: str) -> Decimal:
    summary = get_balances(records, user_id)
    return summary.balances.get(counterparty_id, ZERO)
