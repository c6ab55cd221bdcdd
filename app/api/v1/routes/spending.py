from datetime import date
from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id
from app.core.utils import money
from app.schemas.balance import (
    ActivityOut,
    CategorySpendingOut,
    MonthlySpendingOut,
    SnapshotIn,
    SpendingOverviewOut,
)
from app.services.spending_services import (
    get_recent_activity,
    get_spending_by_category,
    get_spending_by_month,
    get_spending_overview,
)

router = APIRouter()

@router.post("/monthly", response_model=MonthlySpendingOut)
async def monthly_spending(data: SnapshotIn):
    monthly = get_spending_by_month(data.records)
    return MonthlySpendingOut(months={k: money(v) for k, v in sorted(monthly.items())})

@router.post("/categories", response_model=CategorySpendingOut)
async def category_spending(data: SnapshotIn):
    by_category = get_spending_by_category(data.records)
    return CategorySpendingOut(categories={k: money(v) for k, v in sorted(by_category.items())})

@router.post("/overview", response_model=SpendingOverviewOut)
async def spending_overview(
    data: SnapshotIn,
    today: date | None = None,
    previous: int | None = None,
):
    overview = get_spending_overview(data.records, today=today, previous=previous)
    return SpendingOverviewOut.from_overview(overview)

@router.post("/activity", response_model=list[ActivityOut])
async def recent_activity(
    data: SnapshotIn,
    limit: int | None = None,
    current_user: str = Depends(get_current_user_id),
):
    items = get_recent_activity(data.records, current_user, limit=limit)
    return [ActivityOut.from_item(i) for i in items]
