from __future__ import annotations

import pytest

from token_ledger.errors import (AllowanceOverflow, InsufficientBalance,
                                 InvalidAmount, SupplyOverflow)
from token_ledger.math import MAX_AMOUNT, is_u256, require_amount
from token_ledger.math.safe_uint import (checked_add, checked_sub,
                                         try_add_u256, try_sub_u256)


def test_max_amount_is_256_bits() -> None:
    assert MAX_AMOUNT == 2**256 - 1
    assert MAX_AMOUNT.bit_length() == 256


@pytest.mark.parametrize("n", [0, 1, 10**18, MAX_AMOUNT])
def test_is_u256_accepts_range(n: int) -> None:
    assert is_u256(n)
    assert require_amount(n) == n


@pytest.mark.parametrize("n", [-1, MAX_AMOUNT + 1, True, False, 1.0, "1", None])
def test_is_u256_rejects_out_of_domain(n: object) -> None:
    assert not is_u256(n)
    with pytest.raises(InvalidAmount) as ei:
        require_amount(n, field="delta")
    assert ei.value.code == "INVALID_AMOUNT"
    assert ei.value.data["field"] == "delta"


def test_try_helpers_return_none_instead_of_raising() -> None:
    assert try_add_u256(1, 2) == 3
    assert try_add_u256(MAX_AMOUNT, 1) is None
    assert try_add_u256(-1, 1) is None
    assert try_sub_u256(5, 5) == 0
    assert try_sub_u256(4, 5) is None
    assert try_sub_u256(5, MAX_AMOUNT + 1) is None


def test_checked_add_raises_the_requested_kind() -> None:
    assert checked_add(MAX_AMOUNT - 1, 1, error=SupplyOverflow) == MAX_AMOUNT
    with pytest.raises(SupplyOverflow):
        checked_add(MAX_AMOUNT, 1, error=SupplyOverflow)
    with pytest.raises(AllowanceOverflow) as ei:
        checked_add(MAX_AMOUNT, 5, error=AllowanceOverflow, spender=b"\x01" * 20)
    assert ei.value.data == {"spender": "0x" + "01" * 20}


def test_checked_sub_raises_the_requested_kind() -> None:
    assert checked_sub(10, 3, error=InsufficientBalance) == 7
    with pytest.raises(InsufficientBalance) as ei:
        checked_sub(3, 10, error=InsufficientBalance, balance=3, requested=10)
    assert ei.value.data == {"balance": 3, "requested": 10}


def test_checked_helpers_validate_operands_first() -> None:
    with pytest.raises(InvalidAmount):
        checked_add(-1, 1, error=SupplyOverflow)
    with pytest.raises(InvalidAmount):
        checked_sub(1, True, error=InsufficientBalance)
