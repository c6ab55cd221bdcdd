from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id
from app.schemas.balance import BalanceOut, SnapshotIn
from app.services.balance_services import get_balances, get_group_balances
from app.services.record_services import partition_records

router = APIRouter()

@router.post("/", response_model=BalanceOut)
async def my_balances(
    data: SnapshotIn,
    strict: bool = True,
    current_user: str = Depends(get_current_user_id),
):
    if strict:
        return BalanceOut.from_summary(get_balances(data.records, current_user))

    records, errors = partition_records(data.records)
    return BalanceOut.from_summary(get_balances(records, current_user), excluded=errors)


@router.post("/group/{group_id}", response_model=BalanceOut)
async def group_balances(
    group_id: str,
    data: SnapshotIn,
    current_user: str = Depends(get_current_user_id),
):
    return BalanceOut.from_summary(get_group_balances(data.records, current_user, group_id))
