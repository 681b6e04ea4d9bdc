"""SQLAlchemy ORM models for the citation receipt API.

These models mirror the citation office's relational schema.  The
receipt pipeline only ever reads from them; citations, violations and
payments are written by the front office system.  Money columns are
``Numeric`` so values arrive as :class:`decimal.Decimal`.

If you extend or modify these models remember to call the ``init_db``
helper during development to recreate the tables.
"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from citepay.core.database import Base

Money = Numeric(10, 2, asdecimal=True)


class Citation(Base):
    """Traffic citation issued to a driver."""

    __tablename__ = "citations"

    id = Column(Integer, primary_key=True, index=True)
    ticket_number = Column(String(32), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    # Informational aggregate kept by the front office; receipts recompute it
    total_fine = Column(Money, nullable=True)
    created_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)

    violations = relationship("Violation", back_populates="citation", order_by="Violation.id")
    payments = relationship("Payment", back_populates="citation")


class ViolationType(Base):
    """Tariff for one kind of violation, tiered by offense count."""

    __tablename__ = "violation_types"

    id = Column(Integer, primary_key=True, index=True)
    violation_type = Column(String(255), nullable=False)
    fine_amount_1 = Column(Money, nullable=False)
    fine_amount_2 = Column(Money, nullable=True)
    fine_amount_3 = Column(Money, nullable=True)

    violations = relationship("Violation", back_populates="violation_type")


class Violation(Base):
    """One violation occurrence recorded on a citation."""

    __tablename__ = "violations"
    __table_args__ = (CheckConstraint("offense_count >= 1", name="ck_violations_offense_count"),)

    id = Column(Integer, primary_key=True, index=True)
    citation_id = Column(Integer, ForeignKey("citations.id"), nullable=False, index=True)
    violation_type_id = Column(Integer, ForeignKey("violation_types.id"), nullable=False)
    offense_count = Column(Integer, nullable=False, default=1)

    citation = relationship("Citation", back_populates="violations")
    violation_type = relationship("ViolationType", back_populates="violations")


class Payment(Base):
    """Payment settling a citation; ``receipt_number`` is the printed OR number."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    citation_id = Column(Integer, ForeignKey("citations.id"), nullable=False, index=True)
    receipt_number = Column(String(64), unique=True, nullable=False, index=True)
    amount_paid = Column(Money, nullable=False)
    payment_method = Column(String(32), nullable=False, default="CASH")
    payment_date = Column(DateTime, default=dt.datetime.utcnow, nullable=False)
    reference_number = Column(String(100), nullable=True)

    citation = relationship("Citation", back_populates="payments")
