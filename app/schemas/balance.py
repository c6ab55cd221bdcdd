from datetime import date as Date
from decimal import Decimal
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from app.core.utils import ZERO, is_settled, money

class SnapshotIn(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)

class BalanceSummary(BaseModel):
    user_id: str
    balances: Dict[str, Decimal] = Field(default_factory=dict)
    total_owed_to_user: Decimal = ZERO
    total_user_owes: Decimal = ZERO

class BalanceEntryOut(BaseModel):
    counterparty_id: str
    amount: str
    direction: Literal["owes_you", "you_owe", "settled"]

class ExcludedRecordOut(BaseModel):
    record_id: str | None
    reason: str

class BalanceOut(BaseModel):
    user_id: str
    balances: List[BalanceEntryOut]
    total_owed_to_user: str
    total_user_owes: str
    excluded: List[ExcludedRecordOut] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: BalanceSummary, excluded=()):
        entries = []
        for cid, amt in sorted(summary.balances.items()):
            if is_settled(amt):
                direction = "settled"
            elif amt > 0:
                direction = "owes_you"
            else:
                direction = "you_owe"
            entries.append(BalanceEntryOut(counterparty_id=cid, amount=money(amt), direction=direction))

        return cls(
            user_id=summary.user_id,
            balances=entries,
            total_owed_to_user=money(summary.total_owed_to_user),
            total_user_owes=money(summary.total_user_owes),
            excluded=[
                ExcludedRecordOut(record_id=e.record_id, reason=e.reason)
                for e in excluded
            ],
        )

class MonthlySpendingOut(BaseModel):
    months: Dict[str, str]

class CategorySpendingOut(BaseModel):
    categories: Dict[str, str]

class SpendingOverview(BaseModel):
    current_month: str
    current_month_total: Decimal = ZERO
    previous_months: List[tuple[str, Decimal]] = Field(default_factory=list)

class SpendingOverviewOut(BaseModel):
    current_month: str
    current_month_total: str
    previous_months: List[Dict[str, str]]

    @classmethod
    def from_overview(cls, overview: SpendingOverview):
        return cls(
            current_month=overview.current_month,
            current_month_total=money(overview.current_month_total),
            previous_months=[
                {"month": key, "total": money(total)}
                for key, total in overview.previous_months
            ],
        )

class ActivityItem(BaseModel):
    record_id: str
    kind: Literal["expense", "payment"]
    description: str
    amount: Decimal
    date: Date
    payer_id: str
    receiver_id: str | None = None

class ActivityOut(BaseModel):
    record_id: str
    kind: Literal["expense", "payment"]
    description: str
    amount: str
    date: Date
    payer_id: str
    receiver_id: str | None = None

    @classmethod
    def from_item(cls, item: ActivityItem):
        return cls(**item.model_dump(exclude={"amount"}), amount=money(item.amount))
