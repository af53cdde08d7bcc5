from __future__ import annotations

import pytest

from token_ledger.errors import InsufficientBalance
from token_ledger.state.access import AccessController
from token_ledger.state.journal import Journal
from token_ledger.state.ledger import (LedgerStore, SupplyDirection,
                                       TokenMetadata)
from token_ledger.tests import ALICE, BOB, CAROL, OWNER


@pytest.fixture
def parts():
    ledger = LedgerStore(TokenMetadata.build("Example", "EXM", 18))
    access = AccessController(OWNER)
    journal = Journal(ledger, access)
    ledger.adjust_supply(100, SupplyDirection.INCREASE)
    ledger.credit(ALICE, 100)
    return ledger, access, journal


def test_writes_outside_checkpoints_are_not_journaled(parts) -> None:
    _, _, journal = parts
    assert journal.depth() == 0
    assert journal.pending_slots() == 0


def test_revert_restores_every_touched_slot(parts) -> None:
    ledger, access, journal = parts
    cid = journal.checkpoint()
    ledger.debit(ALICE, 30)
    ledger.credit(BOB, 30)
    ledger.debit(ALICE, 10)
    ledger.set_allowance(ALICE, CAROL, 5)
    access.set_paused(OWNER, True)
    access.transfer_ownership(OWNER, CAROL)
    assert journal.pending_slots() == 5
    assert journal.revert(cid) == 5
    assert ledger.balance_of(ALICE) == 100
    assert ledger.balance_of(BOB) == 0
    assert ledger.allowance_of(ALICE, CAROL) == 0
    assert access.paused is False
    assert access.owner == OWNER
    assert journal.depth() == 0


def test_commit_keeps_writes(parts) -> None:
    ledger, _, journal = parts
    cid = journal.checkpoint()
    ledger.debit(ALICE, 1)
    journal.commit(cid)
    assert ledger.balance_of(ALICE) == 99
    assert journal.pending_slots() == 0


def test_nested_commit_folds_into_parent(parts) -> None:
    ledger, _, journal = parts
    outer = journal.checkpoint()
    ledger.debit(ALICE, 10)
    inner = journal.checkpoint()
    ledger.debit(ALICE, 5)
    ledger.credit(BOB, 15)
    journal.commit(inner)
    assert ledger.balance_of(ALICE) == 85
    journal.revert(outer)
    assert ledger.balance_of(ALICE) == 100
    assert ledger.balance_of(BOB) == 0


def test_checkpoints_are_lifo(parts) -> None:
    _, _, journal = parts
    outer = journal.checkpoint()
    journal.checkpoint()
    with pytest.raises(RuntimeError):
        journal.commit(outer)
    with pytest.raises(RuntimeError):
        journal.revert(outer)


def test_empty_stack_is_an_error(parts) -> None:
    _, _, journal = parts
    with pytest.raises(RuntimeError):
        journal.commit(1)


def test_transaction_reverts_on_error_and_reraises(parts) -> None:
    ledger, _, journal = parts
    with pytest.raises(InsufficientBalance):
        with journal.transaction():
            ledger.credit(BOB, 500)
            ledger.debit(ALICE, 500)
    assert ledger.balance_of(BOB) == 0
    assert ledger.balance_of(ALICE) == 100
    assert journal.depth() == 0


def test_transaction_commits_on_success(parts) -> None:
    ledger, _, journal = parts
    with journal.transaction():
        ledger.debit(ALICE, 25)
        ledger.credit(BOB, 25)
    assert ledger.balance_of(BOB) == 25
    assert journal.depth() == 0
