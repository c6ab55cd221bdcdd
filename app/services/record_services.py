import logging
from typing import Any, Iterable, List, Tuple

from pydantic import TypeAdapter, ValidationError

from app.core.exceptions import DataIntegrityError
from app.schemas.expense import ExpenseRecord, PaymentRecord, Record

logger = logging.getLogger(__name__)

_record_adapter = TypeAdapter(Record)

def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"])
        parts.append(f"{loc}: {e['msg']}" if loc else e["msg"])
    return "; ".join(parts)

def _raw_id(raw: Any):
    if isinstance(raw, dict):
        rid = raw.get("id")
        return None if rid is None else str(rid)
    return getattr(raw, "id", None)

def load_record(raw: Any) -> ExpenseRecord | PaymentRecord:
    """Validate one stored document into an expense or payment record."""
    if isinstance(raw, (ExpenseRecord, PaymentRecord)):
        return raw

    try:
        return _record_adapter.validate_python(raw)
    except ValidationError as e:
        raise DataIntegrityError(_raw_id(raw), _describe(e)) from e

def check_snapshot(records: Iterable[ExpenseRecord | PaymentRecord]) -> None:
    seen = set()
    for r in records:
        if r.id in seen:
            raise DataIntegrityError(r.id, "Record appears more than once in snapshot")
        seen.add(r.id)

def load_records(raws: Iterable[Any]) -> List[ExpenseRecord | PaymentRecord]:
    """All-or-nothing load: the first malformed record raises."""
    records = [load_record(raw) for raw in raws]
    check_snapshot(records)
    return records

def partition_records(
    raws: Iterable[Any],
) -> Tuple[List[ExpenseRecord | PaymentRecord], List[DataIntegrityError]]:
    """Split a snapshot into loadable records and per-record integrity errors.

    Every rejected document, including second and later copies of a repeated
    id, is reported so the caller can decide whether to continue without it.
    """
    records = []
    errors = []
    seen = set()

    for raw in raws:
        try:
            record = load_record(raw)
        except DataIntegrityError as e:
            logger.warning("Excluding malformed record: %s", e)
            errors.append(e)
            continue

        if record.id in seen:
            e = DataIntegrityError(record.id, "Record appears more than once in snapshot")
            logger.warning("Excluding malformed record: %s", e)
            errors.append(e)
            continue

        seen.add(record.id)
        records.append(record)

    return records, errors
