"""
End-to-end ledger scenarios: construction, transfers, pause, ownership and
allowance flows, checked against balances, supply and emitted events.
"""
from __future__ import annotations

import pytest

from token_ledger.errors import (ContractPaused, InsufficientAllowance,
                                 InsufficientBalance, InvalidAccount, NotOwner)
from token_ledger.runtime.engine import TokenEngine
from token_ledger.tests import ALICE, BOB, CAROL, OWNER, ZERO
from token_ledger.types.events import Approval, Paused, Transfer


def test_construct_mints_initial_supply_to_recipient(token: TokenEngine) -> None:
    assert token.name() == "Example"
    assert token.symbol() == "EXM"
    assert token.decimals() == 18
    assert token.total_supply() == 1000
    assert token.balance_of(ALICE) == 1000
    assert token.owner() == OWNER
    assert token.paused() is False
    assert token.genesis_events == (Transfer(ZERO, ALICE, 1000),)
    token.check_invariants()


def test_transfer_then_overdraft(token: TokenEngine) -> None:
    res = token.transfer(ALICE, BOB, 300)
    assert res.is_success
    assert res.events == (Transfer(ALICE, BOB, 300),)
    assert token.balance_of(ALICE) == 700
    assert token.balance_of(BOB) == 300

    with pytest.raises(InsufficientBalance):
        token.transfer(ALICE, BOB, 800)
    assert token.balance_of(ALICE) == 700
    assert token.balance_of(BOB) == 300
    assert token.total_supply() == 1000
    token.check_invariants()


def test_pause_blocks_transfer_but_not_mint(token: TokenEngine) -> None:
    assert token.pause(OWNER).events == (Paused(True),)
    with pytest.raises(ContractPaused):
        token.transfer(ALICE, BOB, 1)
    res = token.mint(OWNER, BOB, 50)
    assert res.events == (Transfer(ZERO, BOB, 50),)
    assert token.total_supply() == 1050
    assert token.balance_of(BOB) == 50
    token.check_invariants()


def test_non_owner_cannot_unpause(token: TokenEngine) -> None:
    token.pause(OWNER)
    with pytest.raises(NotOwner):
        token.unpause(ALICE)
    assert token.paused() is True
    assert token.unpause(OWNER).events == (Paused(False),)
    assert token.paused() is False


def test_approve_and_transfer_from_drains_allowance(token: TokenEngine) -> None:
    assert token.approve(ALICE, BOB, 200).events == (Approval(ALICE, BOB, 200),)
    assert token.allowance(ALICE, BOB) == 200

    res = token.transfer_from(BOB, ALICE, CAROL, 200)
    assert res.events == (Transfer(ALICE, CAROL, 200),)
    assert token.allowance(ALICE, BOB) == 0
    assert token.balance_of(ALICE) == 800
    assert token.balance_of(CAROL) == 200

    with pytest.raises(InsufficientAllowance):
        token.transfer_from(BOB, ALICE, CAROL, 1)
    assert token.balance_of(CAROL) == 200


def test_mint_by_non_owner_or_to_zero_fails(token: TokenEngine) -> None:
    with pytest.raises(NotOwner):
        token.mint(ALICE, ALICE, 1)
    with pytest.raises(InvalidAccount):
        token.mint(OWNER, ZERO, 1)
    assert token.total_supply() == 1000
    assert token.balance_of(ALICE) == 1000


def test_sink_receives_commits_in_order(token: TokenEngine, sink) -> None:
    token.transfer(ALICE, BOB, 300)
    with pytest.raises(InsufficientBalance):
        token.transfer(ALICE, BOB, 800)
    token.approve(ALICE, BOB, 5)
    recs = list(sink.get_events())
    assert [r.seq for r in recs] == [1, 2, 3]
    assert [r.op for r in recs] == ["construct", "transfer", "approve"]
    assert [r.name for r in recs] == ["Transfer", "Transfer", "Approval"]
    assert token.events(name="Approval")[0].event == Approval(ALICE, BOB, 5)
