import itertools
import random
from decimal import Decimal

import pytest

from conftest import F1, F2, USER, expense_doc, payment_doc

from app.core.exceptions import DataIntegrityError
from app.services.balance_services import (
    get_balances,
    get_counterparty_balance,
    get_group_balances,
)
from app.services.record_services import load_records


def test_empty_snapshot():
    summary = get_balances([], USER)

    assert summary.balances == {}
    assert summary.total_owed_to_user == 0
    assert summary.total_user_owes == 0


def test_user_pays_equal_split(dinner):
    summary = get_balances([dinner], USER)

    assert summary.balances == {F1: Decimal("20"), F2: Decimal("20")}
    assert summary.total_owed_to_user == Decimal("40")
    assert summary.total_user_owes == 0


def test_friend_pays_and_user_has_share(taxi):
    summary = get_balances([taxi], USER)

    assert summary.balances == {F1: Decimal("-10")}
    assert summary.total_owed_to_user == 0
    assert summary.total_user_owes == Decimal("10")


def test_expenses_net_per_counterparty(dinner, taxi):
    summary = get_balances([dinner, taxi], USER)

    assert summary.balances == {F1: Decimal("10"), F2: Decimal("20")}
    assert summary.total_owed_to_user == Decimal("30")
    assert summary.total_user_owes == 0


def test_payment_accumulates_with_expense_debts(dinner, taxi, settle):
    summary = get_balances([dinner, taxi, settle], USER)

    assert summary.balances[F1] == Decimal("20")
    assert summary.balances[F2] == Decimal("20")


def test_received_payment_is_negative_adjustment():
    payment = payment_doc("p9", "15", F2, USER)
    summary = get_balances([payment], USER)

    assert summary.balances == {F2: Decimal("-15")}
    assert summary.total_user_owes == Decimal("15")


def test_totals_are_not_netted():
    records = [
        expense_doc("a", 50, USER, {F1: 50}),
        expense_doc("b", 30, F2, {USER: 30}),
    ]
    summary = get_balances(records, USER)

    assert summary.total_owed_to_user == Decimal("50")
    assert summary.total_user_owes == Decimal("30")


def test_user_never_appears_as_counterparty(dinner, taxi, settle):
    summary = get_balances([dinner, taxi, settle], USER)
    assert USER not in summary.balances


def test_payer_outside_shares_fronts_for_others():
    record = expense_doc("e5", 40, USER, {F1: 25, F2: 15})
    summary = get_balances([record], USER)

    assert summary.balances == {F1: Decimal("25"), F2: Decimal("15")}


def test_observer_record_contributes_nothing():
    # visible through a shared group, but U neither paid nor has a share
    record = expense_doc("e6", 20, F1, {F1: 10, F2: 10}, groupId="trip")
    others = payment_doc("p6", 5, F1, F2)

    summary = get_balances([record, others], USER)

    assert summary.balances == {}
    assert summary.total_owed_to_user == 0


def test_near_zero_residue_is_reported():
    shares = {USER: Decimal("100") / 3, F1: Decimal("100") / 3, F2: Decimal("100") / 3}
    paid = expense_doc("e7", 100, USER, shares)
    back = payment_doc("p7", "33.33", F1, USER)

    summary = get_balances([paid, back], USER)

    residue = summary.balances[F1]
    assert residue != 0
    assert abs(residue) < Decimal("0.01")


def test_shuffled_input_gives_identical_output(dinner, taxi, settle):
    records = [
        dinner,
        taxi,
        settle,
        expense_doc("e8", "17.35", F2, {USER: "5.785", F2: "11.565"}),
        expense_doc("e9", 100, USER, {F1: Decimal("100") / 3, F2: Decimal("200") / 3}),
        payment_doc("p8", "3.10", F2, USER),
    ]
    expected = get_balances(records, USER)

    rng = random.Random(7)
    for _ in range(20):
        shuffled = records[:]
        rng.shuffle(shuffled)
        assert get_balances(shuffled, USER) == expected

    for perm in itertools.permutations(records[:4]):
        assert get_balances(list(perm), USER) == get_balances(records[:4], USER)


def test_recompute_is_idempotent_and_does_not_mutate(dinner, taxi, settle):
    snapshot = load_records([dinner, taxi, settle])
    before = [r.model_copy(deep=True) for r in snapshot]

    first = get_balances(snapshot, USER)
    second = get_balances(snapshot, USER)

    assert first == second
    assert snapshot == before


def test_expense_without_shares_is_rejected_naming_record(dinner):
    broken = expense_doc("bad-1", 10, F1, {})
    del broken["shares"]

    with pytest.raises(DataIntegrityError) as exc:
        get_balances([dinner, broken], USER)

    assert exc.value.record_id == "bad-1"
    assert "shares" in exc.value.reason


def test_payment_without_receiver_is_rejected(settle):
    broken = payment_doc("bad-2", 10, USER, F1)
    del broken["receiverId"]

    with pytest.raises(DataIntegrityError) as exc:
        get_balances([settle, broken], USER)

    assert exc.value.record_id == "bad-2"


def test_payment_ignores_split_fields():
    payment = payment_doc("p10", 12, USER, F1, splitMethod="equal", shares=[])
    summary = get_balances([payment], USER)

    assert summary.balances == {F1: Decimal("12")}


def test_duplicate_record_ids_rejected(dinner):
    with pytest.raises(DataIntegrityError) as exc:
        get_balances([dinner, dict(dinner)], USER)

    assert exc.value.record_id == "e1"


def test_legacy_document_shape_is_accepted():
    legacy = {
        "id": "old",
        "amount": 30,
        "date": "2024-03-01T18:30:00Z",
        "paidById": USER,
        "splits": [{"friendId": F1, "amount": 15}, {"friendId": USER, "amount": 15}],
    }
    summary = get_balances([legacy], USER)

    assert summary.balances == {F1: Decimal("15")}


def test_group_balances_only_use_that_group(dinner):
    trip = expense_doc("g1", 90, F2, {USER: 45, F2: 45}, groupId="trip")
    trip_payment = payment_doc("g2", 20, USER, F2, groupId="trip")

    summary = get_group_balances([dinner, trip, trip_payment], USER, "trip")

    assert summary.balances == {F2: Decimal("-25")}
    assert summary.total_user_owes == Decimal("25")


def test_counterparty_balance_defaults_to_zero(dinner):
    assert get_counterparty_balance([dinner], USER, F1) == Decimal("20")
    assert get_counterparty_balance([dinner], USER, "stranger") == 0


def test_inflated_shares_never_reach_the_balance(dinner):
    bloated = expense_doc("bloat", 60, USER, {F1: 600})

    with pytest.raises(DataIntegrityError) as exc:
        get_balances([dinner, bloated], USER)

    assert exc.value.record_id == "bloat"
