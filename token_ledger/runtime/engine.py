"""
token_ledger.runtime.engine — the Operation Engine.

`TokenEngine` owns one LedgerStore, one AccessController and the Journal that
spans them. Every mutating call follows the same shape:

  1) take the engine lock (one critical section per call)
  2) open a journal transaction
  3) run the operation body: guards → checked arithmetic on the store
  4) hand the single event to the sink, still inside the transaction
  5) on any error (LedgerError or a failing sink): the journal reverts every
     write, the sequence counter is restored and the error propagates
  6) on success: commit and return OpResult

Guard order inside each body is fixed: malformed amount → zero/malformed
accounts → owner/pause gates → balance/allowance sufficiency. Ownership and
pause transitions delegate to the AccessController, which checks the owner
before validating the target value.

Accounts may be passed as bytes or hex strings; they are normalized to bytes
with the configured width before any check.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

from .. import metrics
from ..config import LedgerConfig, get_config
from ..errors import (AllowanceOverflow, AllowanceUnderflow,
                      InsufficientAllowance, InvariantViolation,
                      LedgerError)
from ..math import is_u256, require_amount
from ..math.safe_uint import checked_add, checked_sub
from ..state.access import AccessController
from ..state.events import (EventRecord, EventSink, InMemoryEventSink,
                            JsonlEventSink)
from ..state.journal import Journal
from ..state.ledger import LedgerStore, SupplyDirection, TokenMetadata
from ..types.address import (AddressLike, is_zero, require_account,
                             to_address, to_hex, zero_address)
from ..types.events import (Approval, Burned, LedgerEvent, OwnershipChange,
                            Paused, Transfer)
from ..types.result import OpResult, OpStatus
from .guards import enforce, only_owner, valid_amount, when_unpaused

log = logging.getLogger(__name__)


class TokenEngine:
    """
    A single fungible-token ledger with owner-gated minting and a pause switch.

    Use `TokenEngine.create(...)` to construct one; it validates metadata, the
    owner and the initial mint.
    """

    def __init__(
        self,
        metadata: TokenMetadata,
        owner: bytes,
        *,
        config: LedgerConfig,
        sink: EventSink,
    ) -> None:
        self._config = config
        self._width = config.accounts.address_bytes
        self._zero = zero_address(self._width)
        self._metrics = config.ambient.metrics_enabled
        self._lock = threading.RLock()
        self._ledger = LedgerStore(metadata)
        self._access = AccessController(owner)
        self._journal = Journal(self._ledger, self._access)
        self._sink = sink
        self._seq = 0
        self._genesis: Tuple[LedgerEvent, ...] = ()

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def create(
        cls,
        name: Any,
        symbol: Any,
        decimals: Any,
        initial_supply: Any,
        recipient: AddressLike,
        owner: AddressLike,
        *,
        config: Optional[LedgerConfig] = None,
        sink: Optional[EventSink] = None,
    ) -> "TokenEngine":
        """
        Validate construction parameters and mint `initial_supply` to `recipient`.

        Raises InvalidDecimals, InvalidMetadata, InvalidAmount or InvalidAccount.
        The recipient may only be the zero account when `initial_supply` is 0.
        """
        cfg = config or get_config()
        width = cfg.accounts.address_bytes
        meta = TokenMetadata.build(
            name,
            symbol,
            decimals,
            max_name_len=cfg.metadata.max_name_len,
            max_symbol_len=cfg.metadata.max_symbol_len,
            uppercase_symbol=cfg.metadata.uppercase_symbol,
        )
        require_amount(initial_supply, field="initial_supply")
        owner_b = require_account(owner, role="owner", width=width)
        if initial_supply > 0:
            recipient_b = require_account(recipient, role="recipient", width=width)
        else:
            recipient_b = to_address(recipient, width=width)

        if sink is None:
            path = cfg.ambient.event_log_path
            sink = JsonlEventSink(path) if path is not None else InMemoryEventSink()

        engine = cls(meta, owner_b, config=cfg, sink=sink)
        if initial_supply > 0:
            engine._ledger.adjust_supply(initial_supply, SupplyDirection.INCREASE)
            engine._ledger.credit(recipient_b, initial_supply)
            genesis = Transfer(engine._zero, recipient_b, initial_supply)
            engine._genesis = (genesis,)
            engine._deliver("construct", genesis)

        log.info(
            "token constructed: %s (%s) decimals=%d supply=%d owner=%s",
            meta.name, meta.symbol, meta.decimals, initial_supply, to_hex(owner_b),
        )
        return engine

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def name(self) -> str:
        return self._ledger.metadata.name

    def symbol(self) -> str:
        return self._ledger.metadata.symbol

    def decimals(self) -> int:
        return self._ledger.metadata.decimals

    def total_supply(self) -> int:
        return self._ledger.total_supply()

    def owner(self) -> bytes:
        return self._access.owner

    def paused(self) -> bool:
        return self._access.paused

    def balance_of(self, account: AddressLike) -> int:
        return self._ledger.balance_of(to_address(account, width=self._width))

    def allowance(self, owner: AddressLike, spender: AddressLike) -> int:
        return self._ledger.allowance_of(
            to_address(owner, width=self._width),
            to_address(spender, width=self._width),
        )

    @property
    def zero_account(self) -> bytes:
        return self._zero

    @property
    def genesis_events(self) -> Tuple[LedgerEvent, ...]:
        """Events produced by construction (the initial mint, if any)."""
        return self._genesis

    @property
    def sink(self) -> EventSink:
        return self._sink

    @property
    def config(self) -> LedgerConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Transfers
    # ------------------------------------------------------------------ #

    def transfer(self, caller: AddressLike, recipient: AddressLike, amount: int) -> OpResult:
        return self._execute("transfer", self._transfer, caller, recipient, amount)

    def _transfer(self, caller: AddressLike, recipient: AddressLike, amount: int) -> LedgerEvent:
        enforce(valid_amount(amount))
        sender = self._account(caller, "caller")
        to = self._account(recipient, "recipient")
        enforce(when_unpaused(self._access))
        self._move(sender, to, amount)
        return Transfer(sender, to, amount)

    def transfer_from(
        self,
        caller: AddressLike,
        owner: AddressLike,
        recipient: AddressLike,
        amount: int,
    ) -> OpResult:
        return self._execute("transfer_from", self._transfer_from, caller, owner, recipient, amount)

    def _transfer_from(
        self,
        caller: AddressLike,
        owner: AddressLike,
        recipient: AddressLike,
        amount: int,
    ) -> LedgerEvent:
        enforce(valid_amount(amount))
        spender = self._account(caller, "caller")
        holder = self._account(owner, "owner")
        to = self._account(recipient, "recipient")
        enforce(when_unpaused(self._access))
        self._spend_allowance(holder, spender, amount)
        self._move(holder, to, amount)
        return Transfer(holder, to, amount)

    # ------------------------------------------------------------------ #
    # Allowances
    # ------------------------------------------------------------------ #

    def approve(self, caller: AddressLike, spender: AddressLike, amount: int) -> OpResult:
        return self._execute("approve", self._approve, caller, spender, amount)

    def _approve(self, caller: AddressLike, spender: AddressLike, amount: int) -> LedgerEvent:
        enforce(valid_amount(amount))
        holder = self._account(caller, "caller")
        sp = self._account(spender, "spender")
        enforce(when_unpaused(self._access))
        self._ledger.set_allowance(holder, sp, amount)
        return Approval(holder, sp, amount)

    def increase_allowance(self, caller: AddressLike, spender: AddressLike, delta: int) -> OpResult:
        return self._execute("increase_allowance", self._increase_allowance, caller, spender, delta)

    def _increase_allowance(self, caller: AddressLike, spender: AddressLike, delta: int) -> LedgerEvent:
        enforce(valid_amount(delta, field="delta"))
        holder = self._account(caller, "caller")
        sp = self._account(spender, "spender")
        enforce(when_unpaused(self._access))
        cur = self._ledger.allowance_of(holder, sp)
        new = checked_add(cur, delta, error=AllowanceOverflow, owner=holder, spender=sp)
        self._ledger.set_allowance(holder, sp, new)
        return Approval(holder, sp, new)

    def decrease_allowance(self, caller: AddressLike, spender: AddressLike, delta: int) -> OpResult:
        return self._execute("decrease_allowance", self._decrease_allowance, caller, spender, delta)

    def _decrease_allowance(self, caller: AddressLike, spender: AddressLike, delta: int) -> LedgerEvent:
        enforce(valid_amount(delta, field="delta"))
        holder = self._account(caller, "caller")
        sp = self._account(spender, "spender")
        enforce(when_unpaused(self._access))
        cur = self._ledger.allowance_of(holder, sp)
        new = checked_sub(
            cur, delta, error=AllowanceUnderflow,
            owner=holder, spender=sp, allowance=cur, requested=delta,
        )
        self._ledger.set_allowance(holder, sp, new)
        return Approval(holder, sp, new)

    # ------------------------------------------------------------------ #
    # Supply
    # ------------------------------------------------------------------ #

    def mint(self, caller: AddressLike, recipient: AddressLike, amount: int) -> OpResult:
        return self._execute("mint", self._mint, caller, recipient, amount)

    def _mint(self, caller: AddressLike, recipient: AddressLike, amount: int) -> LedgerEvent:
        # Minting is deliberately not pause-gated.
        enforce(valid_amount(amount))
        minter = self._account(caller, "caller")
        to = self._account(recipient, "recipient")
        enforce(only_owner(self._access, minter))
        self._ledger.adjust_supply(amount, SupplyDirection.INCREASE)
        self._ledger.credit(to, amount)
        return Transfer(self._zero, to, amount)

    def burn(self, caller: AddressLike, amount: int) -> OpResult:
        return self._execute("burn", self._burn, caller, amount)

    def _burn(self, caller: AddressLike, amount: int) -> LedgerEvent:
        enforce(valid_amount(amount))
        holder = self._account(caller, "caller")
        enforce(when_unpaused(self._access))
        self._destroy(holder, amount)
        return Burned(holder, amount)

    def burn_from(self, caller: AddressLike, account: AddressLike, amount: int) -> OpResult:
        return self._execute("burn_from", self._burn_from, caller, account, amount)

    def _burn_from(self, caller: AddressLike, account: AddressLike, amount: int) -> LedgerEvent:
        enforce(valid_amount(amount))
        spender = self._account(caller, "caller")
        holder = self._account(account, "account")
        enforce(when_unpaused(self._access))
        self._spend_allowance(holder, spender, amount)
        self._destroy(holder, amount)
        return Burned(holder, amount)

    # ------------------------------------------------------------------ #
    # Ownership & pause
    # ------------------------------------------------------------------ #

    def transfer_ownership(self, caller: AddressLike, new_owner: AddressLike) -> OpResult:
        return self._execute("transfer_ownership", self._transfer_ownership, caller, new_owner)

    def _transfer_ownership(self, caller: AddressLike, new_owner: AddressLike) -> LedgerEvent:
        who = self._account(caller, "caller")
        target = to_address(new_owner, width=self._width)
        previous, new = self._access.transfer_ownership(who, target)
        log.info("ownership transferred: %s -> %s", to_hex(previous), to_hex(new))
        return OwnershipChange(previous, new)

    def pause(self, caller: AddressLike) -> OpResult:
        return self._execute("pause", self._set_paused, caller, True)

    def unpause(self, caller: AddressLike) -> OpResult:
        return self._execute("unpause", self._set_paused, caller, False)

    def _set_paused(self, caller: AddressLike, value: bool) -> LedgerEvent:
        who = self._account(caller, "caller")
        status = self._access.set_paused(who, value)
        log.info("ledger %s by %s", "paused" if status else "unpaused", to_hex(who))
        return Paused(status)

    # ------------------------------------------------------------------ #
    # Audit & introspection
    # ------------------------------------------------------------------ #

    def check_invariants(self) -> None:
        """
        Re-verify the ledger invariants against current state.

        Raises InvariantViolation naming the first failed check. Operations never
        raise this; it exists for audits and tests.
        """
        with self._lock:
            supply = self._ledger.total_supply()
            total = 0
            for acct, bal in self._ledger.balances():
                if not is_u256(bal):
                    raise InvariantViolation("balance out of range", account=acct, balance=bal)
                total += bal
            if total != supply:
                raise InvariantViolation(
                    "total supply differs from sum of balances", supply=supply, balances=total,
                )
            for owner, spender, amt in self._ledger.allowances():
                if not is_u256(amt):
                    raise InvariantViolation(
                        "allowance out of range", owner=owner, spender=spender, allowance=amt,
                    )
            if is_zero(self._access.owner):
                raise InvariantViolation("owner is the zero account")
            if not isinstance(self._access.paused, bool):
                raise InvariantViolation("paused flag is not boolean")

    def snapshot(self) -> Dict[str, Any]:
        """JSON-safe view of current state (metadata, access, balances, allowances)."""
        with self._lock:
            out = self._ledger.to_dict()
            out["owner"] = to_hex(self._access.owner)
            out["paused"] = self._access.paused
            out["seq"] = self._seq
            return out

    def events(self, **filters: Any) -> List[EventRecord]:
        """Committed events from the sink, filtered like `EventSink.get_events`."""
        return list(self._sink.get_events(**filters))

    def close(self) -> None:
        """Flush and close the event sink."""
        with self._lock:
            self._sink.flush()
            self._sink.close()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _account(self, value: AddressLike, role: str) -> bytes:
        return require_account(value, role=role, width=self._width)

    def _move(self, sender: bytes, recipient: bytes, amount: int) -> None:
        self._ledger.debit(sender, amount)
        self._ledger.credit(recipient, amount)

    def _destroy(self, holder: bytes, amount: int) -> None:
        self._ledger.debit(holder, amount)
        self._ledger.adjust_supply(amount, SupplyDirection.DECREASE)

    def _spend_allowance(self, holder: bytes, spender: bytes, amount: int) -> None:
        cur = self._ledger.allowance_of(holder, spender)
        new = checked_sub(
            cur, amount, error=InsufficientAllowance,
            owner=holder, spender=spender, allowance=cur, requested=amount,
        )
        self._ledger.set_allowance(holder, spender, new)

    def _deliver(self, op: str, event: LedgerEvent) -> EventRecord:
        self._seq += 1
        return self._sink.append(event, seq=self._seq, op=op)

    def _abort(self, op: str, seq: int) -> None:
        self._seq = seq
        if self._metrics:
            metrics.observe_op(op=op, result="rejected")

    def _timer(self, op: str):
        return metrics.time_op(op) if self._metrics else contextlib.nullcontext()

    def _execute(self, op: str, body: Callable[..., LedgerEvent], *args: Any) -> OpResult:
        with self._lock, self._timer(op):
            seq0 = self._seq
            try:
                # delivery commits together with the writes
                with self._journal.transaction():
                    event = body(*args)
                    rec = self._deliver(op, event)
            except LedgerError as err:
                log.debug("%s rejected: %s", op, err.code)
                self._abort(op, seq0)
                raise
            except Exception as err:
                log.error("%s aborted, state reverted: %r", op, err)
                self._abort(op, seq0)
                raise
            log.debug("%s committed: seq=%d %s", op, rec.seq, event.name)
            if self._metrics:
                metrics.observe_op(op=op, result="success", event=event.name)
            return OpResult(op, OpStatus.SUCCESS, (event,))


__all__ = ["TokenEngine"]
