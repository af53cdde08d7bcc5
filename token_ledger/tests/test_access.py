from __future__ import annotations

import pytest

from token_ledger.errors import (ContractNotPaused, ContractPaused,
                                 InvalidAccount, NotOwner)
from token_ledger.state.access import AccessController
from token_ledger.tests import ALICE, BOB, OWNER, ZERO


@pytest.fixture
def access() -> AccessController:
    return AccessController(OWNER)


def test_owner_must_be_non_zero() -> None:
    with pytest.raises(InvalidAccount):
        AccessController(ZERO)


def test_initial_state(access: AccessController) -> None:
    assert access.owner == OWNER
    assert access.paused is False
    access.require_owner(OWNER)
    access.require_unpaused()
    with pytest.raises(ContractNotPaused):
        access.require_paused()


def test_require_owner_rejects_others(access: AccessController) -> None:
    with pytest.raises(NotOwner) as ei:
        access.require_owner(ALICE)
    assert ei.value.data == {"caller": "0x" + ALICE.hex()}


def test_transfer_ownership_checks_owner_before_target(access: AccessController) -> None:
    with pytest.raises(NotOwner):
        access.transfer_ownership(ALICE, ZERO)
    with pytest.raises(InvalidAccount):
        access.transfer_ownership(OWNER, ZERO)
    assert access.owner == OWNER
    assert access.transfer_ownership(OWNER, BOB) == (OWNER, BOB)
    assert access.owner == BOB
    with pytest.raises(NotOwner):
        access.require_owner(OWNER)


def test_set_paused_is_not_idempotent(access: AccessController) -> None:
    with pytest.raises(ContractNotPaused):
        access.set_paused(OWNER, False)
    assert access.set_paused(OWNER, True) is True
    with pytest.raises(ContractPaused):
        access.set_paused(OWNER, True)
    with pytest.raises(ContractPaused):
        access.require_unpaused()
    assert access.set_paused(OWNER, False) is False
    assert access.paused is False


def test_set_paused_checks_owner_first(access: AccessController) -> None:
    access.set_paused(OWNER, True)
    # already paused, but the non-owner is rejected for ownership first
    with pytest.raises(NotOwner):
        access.set_paused(ALICE, True)
    with pytest.raises(NotOwner):
        access.set_paused(ALICE, False)
    assert access.paused is True
