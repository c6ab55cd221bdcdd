from datetime import date as Date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from app.core.utils import money, to_date, within_tolerance

class SplitMethod(str, Enum):
    EQUAL = "equal"
    EXACT = "exact"
    PERCENT = "percent"
    SHARES = "shares"

# Older documents use ``paidById`` for the payer and ``splits[].friendId``
# for share holders.
LEGACY_KEYS = {
    "paidById": "payerId",
    "splits": "shares",
    "participants": "participantIds",
}


class RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Share(RecordModel):
    participant_id: str
    amount: Decimal

    @model_validator(mode="before")
    @classmethod
    def _legacy_friend_id(cls, data: Any):
        if isinstance(data, dict) and "friendId" in data:
            data = dict(data)
            data.setdefault("participantId", data.pop("friendId"))
        return data


def _share_holder(share: Any) -> Any:
    if isinstance(share, Share):
        return share.participant_id
    if isinstance(share, dict):
        for key in ("participantId", "participant_id", "friendId"):
            if key in share:
                return share[key]
    return None

def _rename_legacy(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for old, new in LEGACY_KEYS.items():
        if old in data and new not in data:
            data[new] = data.pop(old)
    return data


class ExpenseRecord(RecordModel):
    id: str
    amount: Decimal = Field(gt=0)
    date: Date
    category: str = "General"
    description: str = ""
    group_id: str | None = None
    payer_id: str
    split_method: SplitMethod = SplitMethod.EQUAL
    shares: List[Share] = Field(min_length=1)
    participant_ids: List[str] = Field(default_factory=list)
    is_payment: Literal[False] = False

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any):
        data = _rename_legacy(data)
        if isinstance(data, dict) and not data.get("participantIds") and not data.get("participant_ids"):
            shares = data.get("shares") or []
            holders = [_share_holder(s) for s in shares]
            data["participantIds"] = [h for h in holders if h is not None]
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        return to_date(v)

    @model_validator(mode="after")
    def _check_shares(self):
        ids = [s.participant_id for s in self.shares]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate participants found in shares")

        if set(self.participant_ids) != set(ids):
            raise ValueError("Participants do not match share holders")

        total = sum((s.amount for s in self.shares), Decimal("0"))
        if not within_tolerance(total, self.amount):
            raise ValueError(
                f"Shares add up to {money(total)}, expected {money(self.amount)}"
            )
        return self

    def share_of(self, participant_id: str) -> Decimal | None:
        for s in self.shares:
            if s.participant_id == participant_id:
                return s.amount
        return None


class PaymentRecord(RecordModel):
    id: str
    amount: Decimal = Field(gt=0)
    date: Date
    description: str = ""
    group_id: str | None = None
    payer_id: str
    receiver_id: str
    participant_ids: List[str] = Field(default_factory=list)
    is_payment: Literal[True] = True

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any):
        data = _rename_legacy(data)
        if isinstance(data, dict) and not data.get("participantIds") and not data.get("participant_ids"):
            payer = data.get("payerId", data.get("payer_id"))
            receiver = data.get("receiverId", data.get("receiver_id"))
            data["participantIds"] = [p for p in (payer, receiver) if p is not None]
        return data

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        return to_date(v)

    @model_validator(mode="after")
    def _distinct_parties(self):
        if self.payer_id == self.receiver_id:
            raise ValueError("Payer and receiver must be different participants")
        return self


def _record_kind(value: Any) -> str:
    if isinstance(value, dict):
        flag = value.get("isPayment", value.get("is_payment", False))
    else:
        flag = getattr(value, "is_payment", False)
    return "payment" if flag is True else "expense"

Record = Annotated[
    Union[
        Annotated[ExpenseRecord, Tag("expense")],
        Annotated[PaymentRecord, Tag("payment")],
    ],
    Discriminator(_record_kind),
]


class SplitRequest(BaseModel):
    amount: Decimal
    split_method: SplitMethod = SplitMethod.EQUAL
    participants: List[str]
    raw_values: Dict[str, Decimal] = Field(default_factory=dict)

class ExpenseCreate(SplitRequest):
    id: str | None = None
    payer_id: str
    date: Date | None = None
    category: str = "General"
    description: str = ""
    group_id: str | None = None

class ExpenseEdit(BaseModel):
    existing: ExpenseRecord
    changes: ExpenseCreate

class PaymentCreate(BaseModel):
    friend_id: str
    amount: Decimal = Field(gt=0)
    direction: Literal["sent", "received"] = "sent"
    date: Date | None = None
    description: str | None = None
    group_id: str | None = None


class ShareOut(BaseModel):
    participant_id: str
    amount: str

    @classmethod
    def from_share(cls, share: Share):
        return cls(participant_id=share.participant_id, amount=money(share.amount))

class SplitResult(BaseModel):
    is_valid: bool
    method: SplitMethod
    message: str = ""
    reason: str | None = None
    expected: Decimal | None = None
    actual: Decimal | None = None
    shares: List[Share] = Field(default_factory=list)

    @property
    def remaining(self) -> Decimal | None:
        if self.expected is None or self.actual is None:
            return None
        return self.expected - self.actual

class SplitCheckOut(BaseModel):
    is_valid: bool
    method: SplitMethod
    message: str
    reason: str | None = None
    expected: str | None = None
    actual: str | None = None
    remaining: str | None = None
    shares: List[ShareOut]
