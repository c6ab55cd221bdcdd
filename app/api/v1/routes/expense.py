from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_current_user_id
from app.core.utils import money
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseEdit,
    ExpenseRecord,
    PaymentCreate,
    PaymentRecord,
    ShareOut,
    SplitCheckOut,
    SplitRequest,
)
from app.services.expense_services import create_expense, create_payment, edit_expense
from app.services.split_services import validate_splits

router = APIRouter()

@router.post("/splits", response_model=SplitCheckOut)
async def check_splits(data: SplitRequest):
    result = validate_splits(data.amount, data.split_method, data.participants, data.raw_values)
    remaining = result.remaining

    return SplitCheckOut(
        is_valid=result.is_valid,
        method=result.method,
        message=result.message,
        reason=result.reason,
        expected=None if result.expected is None else money(result.expected),
        actual=None if result.actual is None else money(result.actual),
        remaining=None if remaining is None else money(remaining),
        shares=[ShareOut.from_share(s) for s in result.shares],
    )

@router.post("/", response_model=ExpenseRecord, response_model_by_alias=True)
async def add_expense(data: ExpenseCreate, current_user: str = Depends(get_current_user_id)):
    return create_expense(data)

@router.put("/{expense_id}", response_model=ExpenseRecord, response_model_by_alias=True)
async def edit(expense_id: str, data: ExpenseEdit, current_user: str = Depends(get_current_user_id)):
    if data.existing.id != expense_id:
        raise HTTPException(400, "Expense id does not match the record being edited")

    try:
        return edit_expense(data.existing, data.changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/payments", response_model=PaymentRecord, response_model_by_alias=True)
async def settle_up(data: PaymentCreate, current_user: str = Depends(get_current_user_id)):
    try:
        return create_payment(data, user_id=current_user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
