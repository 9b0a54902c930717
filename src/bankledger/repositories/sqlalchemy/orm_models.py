"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from bankledger.repositories.sqlalchemy.database import Base
from bankledger.domain.models.enums import AccountKind, TransactionKind, InstrumentKind


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)

    account_id = Column(String(36), primary_key=True)
    account_number = Column(String(20), unique=True, nullable=False, index=True)
    owner_id = Column(String(64), nullable=False, index=True)
    kind = Column(SqlEnum(AccountKind), default=AccountKind.CHECKING, nullable=False)
    balance = Column(Numeric(precision=18, scale=2), default=Decimal("0"), nullable=False)
    credential_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False)

    transactions = relationship("TransactionORM", back_populates="account")
    holdings = relationship("HoldingORM", back_populates="account")


class TransactionORM(Base):
    """SQLAlchemy model for TransactionRecord (ledger entry)."""

    __tablename__ = "transactions"

    # Append order; breaks ties between records with equal timestamps
    seq = Column(Integer, primary_key=True, autoincrement=True)
    txn_id = Column(String(36), unique=True, nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False, index=True)
    kind = Column(SqlEnum(TransactionKind), nullable=False)
    amount = Column(Numeric(precision=18, scale=2), nullable=False)
    description = Column(Text, nullable=False, default="")
    reference_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, nullable=False)

    account = relationship("AccountORM", back_populates="transactions")


class HoldingORM(Base):
    """SQLAlchemy model for Holding (one purchased lot)."""

    __tablename__ = "holdings"
    __table_args__ = (CheckConstraint("shares > 0", name="ck_holdings_shares_positive"),)

    holding_id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False, index=True)
    instrument_kind = Column(SqlEnum(InstrumentKind), nullable=False)
    symbol = Column(String(20), nullable=False)
    shares = Column(Numeric(precision=18, scale=8), nullable=False)
    purchase_price = Column(Numeric(precision=18, scale=8), nullable=False)
    current_price = Column(Numeric(precision=18, scale=8), nullable=False)
    purchased_at = Column(DateTime, nullable=False)

    account = relationship("AccountORM", back_populates="holdings")
