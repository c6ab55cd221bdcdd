import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from app.core.config import settings
from app.core.utils import ZERO, month_key
from app.schemas.balance import ActivityItem, SpendingOverview
from app.schemas.expense import ExpenseRecord
from app.services.record_services import load_records

logger = logging.getLogger(__name__)

def _expenses(records: Iterable[Any]) -> List[ExpenseRecord]:
    return [r for r in load_records(records) if not r.is_payment]

def get_spending_by_month(records: Iterable[Any]) -> Dict[str, Decimal]:
    """Sum of non-payment expense amounts per ``YYYY-MM`` month.

    Dates are normalized when records load, so an unreadable date fails that
    record with ``DataIntegrityError`` rather than landing in a wrong bucket.
    """
    monthly: Dict[str, Decimal] = {}

    for expense in _expenses(records):
        key = month_key(expense.date)
        monthly[key] = monthly.get(key, ZERO) + expense.amount

    logger.debug("Spending grouped into %d months", len(monthly))
    return monthly

def get_spending_by_category(records: Iterable[Any]) -> Dict[str, Decimal]:
    by_category: Dict[str, Decimal] = {}

    for expense in _expenses(records):
        by_category[expense.category] = by_category.get(expense.category, ZERO) + expense.amount

    return by_category

def get_spending_overview(
    records: Iterable[Any],
    today: date | None = None,
    previous: int | None = None,
) -> SpendingOverview:
    """This month's spending plus the most recent earlier months, newest first.

    Months after ``today`` (future-dated expenses) are not listed as previous.
    """
    today = today or date.today()
    previous = settings.PREVIOUS_MONTHS if previous is None else previous

    monthly = get_spending_by_month(records)
    current = month_key(today)

    earlier = sorted((k for k in monthly if k < current), reverse=True)[:previous]

    return SpendingOverview(
        current_month=current,
        current_month_total=monthly.get(current, ZERO),
        previous_months=[(k, monthly[k]) for k in earlier],
    )

def get_recent_activity(
    records: Iterable[Any],
    user_id: str,
    limit: int | None = None,
    names: Mapping[str, str] | None = None,
) -> List[ActivityItem]:
    limit = settings.RECENT_ACTIVITY_LIMIT if limit is None else limit
    names = names or {}

    def name(pid: str) -> str:
        return names.get(pid, pid)

    snapshot = load_records(records)
    # newest first; id breaks ties so equal dates stay stable
    ordered = sorted(snapshot, key=lambda r: r.id, reverse=True)
    ordered.sort(key=lambda r: r.date, reverse=True)

    items = []
    for r in ordered[:limit]:
        if r.is_payment:
            if r.payer_id == user_id:
                text = f"You paid {name(r.receiver_id)}"
            elif r.receiver_id == user_id:
                text = f"{name(r.payer_id)} paid you"
            else:
                text = f"{name(r.payer_id)} paid {name(r.receiver_id)}"
            items.append(ActivityItem(
                record_id=r.id,
                kind="payment",
                description=text,
                amount=r.amount,
                date=r.date,
                payer_id=r.payer_id,
                receiver_id=r.receiver_id,
            ))
        else:
            items.append(ActivityItem(
                record_id=r.id,
                kind="expense",
                description=r.description or r.category,
                amount=r.amount,
                date=r.date,
                payer_id=r.payer_id,
            ))

    return items
