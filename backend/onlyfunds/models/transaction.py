"""
Transaction database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Numeric, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from onlyfunds.database import Base


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    expense = "expense"
    income = "income"


class ExpenseCategory(str, enum.Enum):
    """Known expense categories."""
    food = "food"
    transportation = "transportation"
    entertainment = "entertainment"
    utilities = "utilities"
    healthcare = "healthcare"
    shopping = "shopping"
    education = "education"
    other = "other"


class IncomeCategory(str, enum.Enum):
    """Known income categories."""
    salary = "salary"
    freelance = "freelance"
    investment = "investment"
    gift = "gift"
    other = "other"


class Transaction(Base):
    """Income or expense record."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Always non-negative; type carries the sign
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)  # Known category value or resolved custom name
    date = Column(Date, nullable=False)  # Attribution date, not creation time
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="transactions")

    # Indexes for common queries
    __table_args__ = (
        Index("idx_transaction_user_date", "user_id", "date"),
        Index("idx_transaction_user_type", "user_id", "type"),
    )
