import logging
from datetime import date
from uuid import uuid4

from app.schemas.expense import ExpenseCreate, ExpenseRecord, PaymentCreate, PaymentRecord
from app.services.split_services import compute_splits

logger = logging.getLogger(__name__)

def _new_id() -> str:
    return uuid4().hex

def create_expense(data: ExpenseCreate) -> ExpenseRecord:
    # 1. Validate the split and resolve shares
    shares = compute_splits(
        data.amount,
        data.split_method,
        data.participants,
        data.raw_values,
    )

    # 2. Attach user-entered metadata
    expense = ExpenseRecord(
        id=data.id or _new_id(),
        amount=data.amount,
        date=data.date or date.today(),
        category=data.category,
        description=data.description,
        group_id=data.group_id,
        payer_id=data.payer_id,
        split_method=data.split_method,
        shares=shares,
        participant_ids=[s.participant_id for s in shares],
    )

    logger.info("Created expense %s paid by %s (%s)", expense.id, expense.payer_id, expense.amount)
    return expense

def edit_expense(existing: ExpenseRecord, data: ExpenseCreate) -> ExpenseRecord:
    """Build the next version of ``existing``; the old record is not touched."""
    if data.id is not None and data.id != existing.id:
        raise ValueError("Edited expense must keep the id of the expense it replaces")

    changes = data.model_copy(update={
        "id": existing.id,
        "date": data.date or existing.date,
    })
    return create_expense(changes)

def create_payment(data: PaymentCreate, user_id: str) -> PaymentRecord:
    """Record a settle-up between the current user and one friend.

    ``direction="sent"`` means the user paid the friend, ``"received"`` that
    the friend paid the user.
    """
    if data.friend_id == user_id:
        raise ValueError("Cannot record a payment to yourself")

    if data.direction == "sent":
        payer_id, receiver_id = user_id, data.friend_id
        description = data.description or f"Payment to {data.friend_id}"
    else:
        payer_id, receiver_id = data.friend_id, user_id
        description = data.description or f"Payment from {data.friend_id}"

    payment = PaymentRecord(
        id=_new_id(),
        amount=data.amount,
        date=data.date or date.today(),
        description=description,
        group_id=data.group_id,
        payer_id=payer_id,
        receiver_id=receiver_id,
        participant_ids=[payer_id, receiver_id],
    )

    logger.info("Recorded payment %s: %s paid %s %s", payment.id, payer_id, receiver_id, payment.amount)
    return payment
