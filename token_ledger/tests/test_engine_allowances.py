from __future__ import annotations

import pytest

from token_ledger.errors import (AllowanceOverflow, AllowanceUnderflow,
                                 ContractPaused, InvalidAccount, InvalidAmount)
from token_ledger.math import MAX_AMOUNT
from token_ledger.runtime.engine import TokenEngine
from token_ledger.tests import ALICE, BOB, OWNER, ZERO
from token_ledger.types.events import Approval


def test_approve_sets_absolute_value(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, 100)
    token.approve(ALICE, BOB, 30)
    assert token.allowance(ALICE, BOB) == 30
    assert token.allowance(BOB, ALICE) == 0


def test_approve_more_than_balance_is_allowed(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, MAX_AMOUNT)
    assert token.allowance(ALICE, BOB) == MAX_AMOUNT


def test_approve_rejects_zero_spender_and_paused(token: TokenEngine) -> None:
    with pytest.raises(InvalidAccount):
        token.approve(ALICE, ZERO, 1)
    token.pause(OWNER)
    with pytest.raises(ContractPaused):
        token.approve(ALICE, BOB, 1)


def test_increase_and_decrease_emit_new_value(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, 10)
    assert token.increase_allowance(ALICE, BOB, 5).events == (Approval(ALICE, BOB, 15),)
    assert token.decrease_allowance(ALICE, BOB, 15).events == (Approval(ALICE, BOB, 0),)
    assert token.allowance(ALICE, BOB) == 0


def test_increase_then_decrease_restores(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, 77)
    token.increase_allowance(ALICE, BOB, 1234)
    token.decrease_allowance(ALICE, BOB, 1234)
    assert token.allowance(ALICE, BOB) == 77


def test_increase_overflow(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, MAX_AMOUNT)
    with pytest.raises(AllowanceOverflow):
        token.increase_allowance(ALICE, BOB, 1)
    assert token.allowance(ALICE, BOB) == MAX_AMOUNT


def test_decrease_underflow(token: TokenEngine) -> None:
    token.approve(ALICE, BOB, 3)
    with pytest.raises(AllowanceUnderflow) as ei:
        token.decrease_allowance(ALICE, BOB, 4)
    assert ei.value.data["allowance"] == 3
    assert token.allowance(ALICE, BOB) == 3


def test_delta_validation_and_pause(token: TokenEngine) -> None:
    with pytest.raises(InvalidAmount) as ei:
        token.increase_allowance(ALICE, BOB, -5)
    assert ei.value.data["field"] == "delta"
    token.pause(OWNER)
    with pytest.raises(ContractPaused):
        token.increase_allowance(ALICE, BOB, 1)
    with pytest.raises(ContractPaused):
        token.decrease_allowance(ALICE, BOB, 0)
