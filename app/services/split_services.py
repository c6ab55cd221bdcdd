import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from app.core.exceptions import SplitValidationError
from app.core.utils import ZERO, qround, to_decimal, within_tolerance
from app.schemas.expense import Share, SplitMethod, SplitResult

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

def compute_splits(
    amount: Any,
    split_method: SplitMethod | str,
    participants: Iterable[str],
    raw_values: Mapping[str, Any] | None = None,
) -> List[Share]:
    """Turn one expense's total and raw per-participant inputs into shares.

    ``raw_values`` is only read for exact, percent and shares splits; ids
    missing from it count as zero and ids outside ``participants`` are
    ignored. Share amounts keep full precision; round with ``qround`` only
    when rendering.

    Raises ``SplitValidationError`` (with expected and entered numbers) when
    the inputs break the method's rule.
    """
    method = SplitMethod(split_method)
    participants = list(participants)
    amount = to_decimal(amount)

    # 1. Participant set
    if not participants:
        raise SplitValidationError(
            "no_participants",
            "Select at least one participant.",
            expected=Decimal(1),
            actual=ZERO,
            method=method.value,
        )

    if len(participants) != len(set(participants)):
        raise SplitValidationError(
            "duplicate_participants",
            "Duplicate participants found in split.",
            expected=Decimal(len(set(participants))),
            actual=Decimal(len(participants)),
            method=method.value,
        )

    # 2. Positive total
    if amount <= 0:
        raise SplitValidationError(
            "non_positive_amount",
            "Amount must be greater than 0.",
            expected=ZERO,
            actual=amount,
            method=method.value,
        )

    if method is SplitMethod.EQUAL:
        each = amount / len(participants)
        shares = [Share(participant_id=pid, amount=each) for pid in participants]
        logger.debug("Equal split of %s among %d participants", amount, len(participants))
        return shares

    values = _collect_values(participants, raw_values or {})
    total = sum(values.values(), ZERO)

    # 3. Method rule
    if method is SplitMethod.EXACT:
        if not within_tolerance(total, amount):
            raise SplitValidationError(
                "exact_total_mismatch",
                f"Total must be ${qround(amount)}. Currently ${qround(total)}.",
                expected=amount,
                actual=total,
                method=method.value,
            )
        shares = [Share(participant_id=pid, amount=v) for pid, v in values.items()]

    elif method is SplitMethod.PERCENT:
        if not within_tolerance(total, HUNDRED):
            raise SplitValidationError(
                "percent_total_mismatch",
                f"Total must be 100%. Currently {total.normalize():f}%.",
                expected=HUNDRED,
                actual=total,
                method=method.value,
            )
        shares = [
            Share(participant_id=pid, amount=amount * (v / HUNDRED))
            for pid, v in values.items()
        ]

    else:
        if total <= 0:
            raise SplitValidationError(
                "shares_total_not_positive",
                "Total shares must be greater than 0.",
                expected=ZERO,
                actual=total,
                method=method.value,
            )
        shares = [
            Share(participant_id=pid, amount=amount * (v / total))
            for pid, v in values.items()
        ]

    logger.debug("%s split of %s validated (entered total %s)", method.value, amount, total)
    return shares

def validate_splits(
    amount: Any,
    split_method: SplitMethod | str,
    participants: Iterable[str],
    raw_values: Mapping[str, Any] | None = None,
) -> SplitResult:
    """Non-raising variant of ``compute_splits`` for live form checks."""
    method = SplitMethod(split_method)
    try:
        shares = compute_splits(amount, method, participants, raw_values)
    except SplitValidationError as e:
        return SplitResult(
            is_valid=False,
            method=method,
            message=e.message,
            reason=e.reason,
            expected=e.expected,
            actual=e.actual,
        )

    total = sum((s.amount for s in shares), ZERO)
    if method is SplitMethod.PERCENT:
        entered = sum(_collect_values([s.participant_id for s in shares], raw_values or {}).values(), ZERO)
        return SplitResult(is_valid=True, method=method, expected=HUNDRED, actual=entered, shares=shares)

    return SplitResult(is_valid=True, method=method, expected=to_decimal(amount), actual=total, shares=shares)

def _collect_values(participants: List[str], raw_values: Mapping[str, Any]) -> Dict[str, Decimal]:
    values = {}
    for pid in participants:
        raw = raw_values.get(pid)
        values[pid] = ZERO if raw is None else to_decimal(raw)
    return values
