"""Ledger engine: atomic balance, transfer and investment operations."""

import logging
import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Callable, Iterator, Optional, Union

from bankledger.core.exceptions import (
    ConflictError,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidAmountError,
    NotFoundError,
    RecipientNotFoundError,
    StorageError,
    UnavailableError,
    ValidationError,
)
from bankledger.core.money import (
    ZERO,
    Numeric,
    fits_storage,
    format_quantity,
    require_money,
    require_positive,
    round_money,
)
from bankledger.core.timezone import now_utc
from bankledger.domain.models import (
    Holding,
    InstrumentKind,
    TransactionKind,
    TransactionRecord,
)
from bankledger.domain.views import (
    BalanceChange,
    PurchaseResult,
    SaleResult,
    TransferResult,
)
from bankledger.repositories.protocols import AccountStore, HoldingBook, TransactionLog

logger = logging.getLogger(__name__)


class _Compensations:
    """
    Undo steps for the writes an operation has already made.

    Steps run newest first. A step that fails is logged with enough detail
    for manual reconciliation and turns the whole failure into StorageError.
    """

    def __init__(self, operation: str, subject: str):
        self._operation = operation
        self._subject = subject
        self._steps: list[tuple[str, Callable[[], object]]] = []

    def add(self, label: str, undo: Callable[[], object]) -> None:
        self._steps.append((label, undo))

    def run(self) -> None:
        failed: list[str] = []
        for label, undo in reversed(self._steps):
            try:
                undo()
                logger.warning("%s %s: compensated (%s)", self._operation, self._subject, label)
            except Exception as exc:
                logger.error(
                    "%s %s: compensation '%s' failed, reconciliation required: %s",
                    self._operation,
                    self._subject,
                    label,
                    exc,
                )
                failed.append(label)
        self._steps.clear()
        if failed:
            raise StorageError(
                f"{self._operation} for {self._subject} failed and could not be "
                f"reversed ({', '.join(failed)}); reconciliation required"
            )

    @contextmanager
    def rollback_on_error(self) -> Iterator[None]:
        """Undo all recorded steps if the wrapped write raises, then re-raise."""
        try:
            yield
        except Exception:
            self.run()
            raise


class LedgerEngine:
    """
    Engine for all money movements.

    Every operation re-reads current state, validates it, and commits its
    balance change together with the matching ledger record(s) and holding
    change. Balance writes are optimistic compare-and-swap calls against the
    balance just read; a conflicting concurrent writer causes a bounded
    re-read-and-retry, never a lost update. Stores without multi-record
    transactions are handled saga-style: if a later step fails, earlier
    writes are reversed before the error reaches the caller, so from the
    outside every operation is all-or-nothing.

    The engine holds no cached state and does not own its stores; the
    composing application injects them and controls their lifecycle.
    """

    def __init__(
        self,
        account_store: AccountStore,
        transaction_log: TransactionLog,
        holding_book: HoldingBook,
        max_retries: int = 3,
        backoff_seconds: float = 0.01,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._accounts = account_store
        self._log = transaction_log
        self._holdings = holding_book
        self._max_retries = max_retries
        self._backoff_seconds = backoff_seconds
        self._clock = clock

    # ------------------------------------------------------------------
    # Cash operations
    # ------------------------------------------------------------------

    def deposit(
        self,
        account_id: str,
        amount: Numeric,
        description: str = "Deposit",
    ) -> BalanceChange:
        """
        Credit ``amount`` to an account and record a deposit.

        Raises InvalidAmountError, NotFoundError, UnavailableError (conflict
        retries exhausted) or StorageError.
        """
        amount = require_money("amount", amount)
        undo = _Compensations("deposit", account_id)

        new_balance = self._apply_delta(account_id, amount)
        undo.add("reverse credit", partial(self._apply_delta, account_id, -amount))

        record = self._new_record(account_id, TransactionKind.DEPOSIT, amount, description)
        with undo.rollback_on_error():
            self._log.append(record)

        logger.info("Deposited %s into %s (txn %s)", amount, account_id, record.txn_id)
        return BalanceChange(account_id=account_id, new_balance=new_balance, transaction=record)

    def withdraw(
        self,
        account_id: str,
        amount: Numeric,
        description: str = "Withdrawal",
    ) -> BalanceChange:
        """
        Debit ``amount`` from an account and record a withdrawal.

        Raises InsufficientFundsError without touching anything when the
        balance is lower than ``amount``.
        """
        amount = require_money("amount", amount)
        undo = _Compensations("withdrawal", account_id)

        new_balance = self._apply_delta(account_id, -amount)
        undo.add("reverse debit", partial(self._apply_delta, account_id, amount))

        record = self._new_record(account_id, TransactionKind.WITHDRAWAL, amount, description)
        with undo.rollback_on_error():
            self._log.append(record)

        logger.info("Withdrew %s from %s (txn %s)", amount, account_id, record.txn_id)
        return BalanceChange(account_id=account_id, new_balance=new_balance, transaction=record)

    def transfer(
        self,
        from_account_id: str,
        to_account_number: str,
        amount: Numeric,
        description: str = "Transfer",
    ) -> TransferResult:
        """
        Move ``amount`` from one account to the account with ``to_account_number``.

        Both balances change and two mutually referencing transfer records
        are written, or nothing is. Balances are updated in ascending
        account-id order whatever the direction, so every transfer touching
        the same pair of accounts acquires them in the same order.
        """
        amount = require_money("amount", amount)

        sender = self._accounts.get_by_id(from_account_id)
        if sender is None:
            raise NotFoundError("Account", from_account_id)
        to_account_id = self._accounts.resolve_account_number(to_account_number)
        if to_account_id is None:
            raise RecipientNotFoundError(to_account_number)
        if to_account_id == from_account_id:
            raise ValidationError("Cannot transfer to the same account")

        available = self._accounts.get_balance(from_account_id)
        if amount > available:
            raise InsufficientFundsError(str(amount), str(available))

        deltas = {from_account_id: -amount, to_account_id: amount}
        undo = _Compensations("transfer", f"{from_account_id}->{to_account_id}")
        new_balance: Optional[Decimal] = None

        for account_id in sorted(deltas):
            delta = deltas[account_id]
            with undo.rollback_on_error():
                balance = self._apply_delta(account_id, delta)
            undo.add(f"reverse leg on {account_id}", partial(self._apply_delta, account_id, -delta))
            if account_id == from_account_id:
                new_balance = balance

        debit_id, credit_id = str(uuid.uuid4()), str(uuid.uuid4())
        debit_leg = self._new_record(
            from_account_id,
            TransactionKind.TRANSFER,
            amount,
            f"{description} to {to_account_number}",
            txn_id=debit_id,
            reference_id=credit_id,
        )
        credit_leg = self._new_record(
            to_account_id,
            TransactionKind.TRANSFER,
            amount,
            f"{description} from {sender.account_number}",
            txn_id=credit_id,
            reference_id=debit_id,
        )
        with undo.rollback_on_error():
            self._log.append_linked(debit_leg, credit_leg)

        logger.info(
            "Transferred %s from %s to %s (txns %s/%s)",
            amount,
            from_account_id,
            to_account_id,
            debit_id,
            credit_id,
        )
        return TransferResult(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            new_balance=new_balance,
            debit_leg=debit_leg,
            credit_leg=credit_leg,
        )

    # ------------------------------------------------------------------
    # Investment operations
    # ------------------------------------------------------------------

    def purchase_investment(
        self,
        account_id: str,
        instrument_kind: Union[InstrumentKind, str],
        symbol: str,
        shares: Numeric,
        price: Numeric,
    ) -> PurchaseResult:
        """
        Buy a new lot of ``shares`` at ``price`` using the account's cash.

        A new holding is created on every purchase, even for a symbol the
        account already holds.
        """
        shares = require_positive("shares", shares)
        price = require_positive("price", price)
        kind = self._parse_instrument_kind(instrument_kind)
        symbol = self._normalize_symbol(symbol)

        cost = round_money(shares * price)
        if cost <= ZERO or not fits_storage(cost):
            raise InvalidAmountError("cost", cost)

        undo = _Compensations("purchase", account_id)
        new_balance = self._apply_delta(account_id, -cost)
        undo.add("refund purchase cost", partial(self._apply_delta, account_id, cost))

        holding = Holding(
            holding_id=str(uuid.uuid4()),
            account_id=account_id,
            instrument_kind=kind,
            symbol=symbol,
            shares=shares,
            purchase_price=price,
            current_price=price,
            purchased_at=self._clock(),
        )
        with undo.rollback_on_error():
            self._holdings.create(holding)
        undo.add(
            "remove purchased holding",
            partial(self._holdings.reduce_or_close, holding.holding_id, shares),
        )

        record = self._new_record(
            account_id,
            TransactionKind.INVESTMENT,
            cost,
            f"Purchased {format_quantity(shares)} shares of {symbol}",
        )
        with undo.rollback_on_error():
            self._log.append(record)

        logger.info(
            "Purchased %s %s for %s in %s (holding %s)",
            shares,
            symbol,
            cost,
            account_id,
            holding.holding_id,
        )
        return PurchaseResult(new_balance=new_balance, cost=cost, holding=holding, transaction=record)

    def sell_investment(
        self,
        holding_id: str,
        account_id: str,
        shares_to_sell: Numeric,
        selling_price: Numeric,
    ) -> SaleResult:
        """
        Sell part or all of a holding and credit the proceeds.

        Selling every share closes the holding (its row is removed).
        Raises NotFoundError if the holding does not exist or belongs to
        another account, InsufficientSharesError if more shares are
        requested than held.
        """
        shares = require_positive("shares_to_sell", shares_to_sell)
        price = require_positive("selling_price", selling_price)

        holding = self._holdings.get(holding_id)
        if holding is None or holding.account_id != account_id:
            raise NotFoundError("Holding", holding_id)
        if shares > holding.shares:
            raise InsufficientSharesError(holding.symbol, str(shares), str(holding.shares))

        proceeds = round_money(shares * price)
        if proceeds <= ZERO or not fits_storage(proceeds):
            raise InvalidAmountError("proceeds", proceeds)

        # Fail on an unknown account before the holding is touched
        self._accounts.get_balance(account_id)

        undo = _Compensations("sale", account_id)
        try:
            remaining = self._holdings.reduce_or_close(holding_id, shares)
        except ConflictError as exc:
            raise UnavailableError(f"Holding {holding_id} is busy, try again") from exc
        undo.add("reinstate sold shares", partial(self._holdings.reinstate, holding, shares))

        with undo.rollback_on_error():
            new_balance = self._apply_delta(account_id, proceeds)
        undo.add("reverse sale proceeds", partial(self._apply_delta, account_id, -proceeds))

        record = self._new_record(
            account_id,
            TransactionKind.INVESTMENT,
            proceeds,
            f"Sold {format_quantity(shares)} shares of {holding.symbol}",
        )
        with undo.rollback_on_error():
            self._log.append(record)

        logger.info(
            "Sold %s %s for %s in %s (holding %s, %s left)",
            shares,
            holding.symbol,
            proceeds,
            account_id,
            holding_id,
            remaining,
        )
        return SaleResult(
            new_balance=new_balance,
            proceeds=proceeds,
            remaining_shares=remaining,
            transaction=record,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_delta(self, account_id: str, delta: Decimal) -> Decimal:
        """
        Read-check-write a balance change with bounded conflict retries.

        Raises InsufficientFundsError if the freshly read balance cannot
        absorb a debit, InvalidAmountError if a credit would leave a balance
        the store cannot hold exactly, UnavailableError once retries are
        exhausted.
        """
        for attempt in range(self._max_retries + 1):
            balance = self._accounts.get_balance(account_id)
            if balance + delta < ZERO:
                raise InsufficientFundsError(str(-delta), str(balance))
            if not fits_storage(balance + delta):
                raise InvalidAmountError("balance", balance + delta)
            try:
                return self._accounts.apply_balance_delta(account_id, delta, balance)
            except ConflictError:
                logger.debug(
                    "Balance conflict on %s (attempt %d/%d)",
                    account_id,
                    attempt + 1,
                    self._max_retries + 1,
                )
                if attempt < self._max_retries and self._backoff_seconds:
                    time.sleep(self._backoff_seconds * (attempt + 1))

        raise UnavailableError(
            f"Account {account_id} is busy: balance kept changing, try again"
        )

    def _new_record(
        self,
        account_id: str,
        kind: TransactionKind,
        amount: Decimal,
        description: str,
        txn_id: Optional[str] = None,
        reference_id: Optional[str] = None,
    ) -> TransactionRecord:
        return TransactionRecord(
            txn_id=txn_id or str(uuid.uuid4()),
            account_id=account_id,
            kind=kind,
            amount=amount,
            description=description,
            reference_id=reference_id,
            created_at=self._clock(),
        )

    @staticmethod
    def _parse_instrument_kind(value: Union[InstrumentKind, str]) -> InstrumentKind:
        try:
            return InstrumentKind(value)
        except ValueError:
            raise ValidationError(f"Unknown instrument kind: {value}")

    @staticmethod
    def _normalize_symbol(symbol: str) -> str:
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("Investment requires a symbol")
        return symbol
