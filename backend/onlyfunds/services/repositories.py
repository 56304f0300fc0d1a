"""
Local cache repositories for transactions and budgets.

Writes commit immediately so the local copy is always authoritative for
the current request; cloud sync happens separately (see sync_service).
"""

import logging
import uuid
from datetime import datetime, date
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from onlyfunds.models.budget import Budget
from onlyfunds.models.transaction import Transaction, TransactionType
from onlyfunds.schemas.transaction import TransactionSort
from onlyfunds.services.periods import resolve_target_period, month_bounds

logger = logging.getLogger(__name__)


class BudgetConflictError(Exception):
    """Another budget already covers this (category, month, year)."""


@dataclass
class MergeResult:
    """Cloud records written by a merge and the (month, year) periods they touched."""
    merged: int = 0
    periods: Set[Tuple[int, int]] = field(default_factory=set)


_TRANSACTION_ORDER = {
    TransactionSort.date_desc: (Transaction.date.desc(), Transaction.created_at.desc()),
    TransactionSort.date_asc: (Transaction.date.asc(), Transaction.created_at.asc()),
    TransactionSort.amount_desc: (Transaction.amount.desc(), Transaction.date.desc()),
    TransactionSort.amount_asc: (Transaction.amount.asc(), Transaction.date.desc()),
}


class TransactionRepository:
    """Transactions for one database session."""

    def __init__(self, db: Session):
        self.db = db

    def get_transactions(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
        sort: TransactionSort = TransactionSort.date_desc
    ) -> List[Transaction]:
        query = self.db.query(Transaction).filter(Transaction.user_id == user_id)
        if type is not None:
            query = query.filter(Transaction.type == type)
        return query.order_by(*_TRANSACTION_ORDER[sort]).all()

    def get_transaction(self, user_id: str, transaction_id: str) -> Optional[Transaction]:
        return self.db.query(Transaction).filter(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id
        ).first()

    def add_transaction(
        self,
        user_id: str,
        type: TransactionType,
        amount: Decimal,
        description: str,
        category: str,
        date: date
    ) -> Transaction:
        transaction = Transaction(
            id=str(uuid.uuid4()),
            user_id=user_id,
            type=type,
            amount=amount,
            description=description,
            category=category,
            date=date,
            created_at=datetime.utcnow(),
        )
        self.db.add(transaction)
        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def delete_transaction(self, user_id: str, transaction_id: str) -> bool:
        transaction = self.get_transaction(user_id, transaction_id)
        if not transaction:
            return False
        self.db.delete(transaction)
        self.db.commit()
        return True

    def get_total_by_type(self, user_id: str, type: TransactionType) -> Decimal:
        total = self.db.query(func.sum(Transaction.amount)).filter(
            Transaction.user_id == user_id,
            Transaction.type == type
        ).scalar()
        return Decimal(total) if total is not None else Decimal("0")

    def get_monthly_total(
        self,
        user_id: str,
        type: TransactionType,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> Decimal:
        month, year = resolve_target_period(month, year)
        start_date, end_date = month_bounds(month, year)
        total = self.db.query(func.sum(Transaction.amount)).filter(
            Transaction.user_id == user_id,
            Transaction.type == type,
            Transaction.date >= start_date,
            Transaction.date < end_date
        ).scalar()
        return Decimal(total) if total is not None else Decimal("0")

    def merge_remote(self, user_id: str, records: Iterable[Dict[str, Any]]) -> MergeResult:
        """
        Merge cloud records into the local cache.

        Cloud data wins for ids present on both sides; local-only records are
        kept. Records whose id is already owned by another user are skipped.
        Nothing is written if any record fails.
        """
        result = MergeResult()
        try:
            for record in records:
                if record["user_id"] != user_id:
                    continue
                transaction = self.db.query(Transaction).filter(Transaction.id == record["id"]).first()
                if transaction is not None and transaction.user_id != user_id:
                    logger.warning(f"Skipping cloud transaction {record['id']}: id belongs to another user")
                    continue
                if transaction is None:
                    transaction = Transaction(id=record["id"], user_id=user_id)
                    self.db.add(transaction)
                else:
                    result.periods.add((transaction.date.month, transaction.date.year))
                transaction.type = TransactionType(record["type"])
                transaction.amount = record["amount"]
                transaction.description = record["description"]
                transaction.category = record["category"]
                transaction.date = record["date"]
                transaction.created_at = record["created_at"]
                self.db.flush()
                result.merged += 1
                result.periods.add((record["date"].month, record["date"].year))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result


class BudgetRepository:
    """Budgets for one database session."""

    def __init__(self, db: Session):
        self.db = db

    def get_budgets(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> List[Budget]:
        query = self.db.query(Budget).filter(Budget.user_id == user_id)
        if month is not None:
            query = query.filter(Budget.month == month)
        if year is not None:
            query = query.filter(Budget.year == year)
        return query.order_by(Budget.year, Budget.month, Budget.created_at).all()

    def get_budget(self, user_id: str, budget_id: str) -> Optional[Budget]:
        return self.db.query(Budget).filter(
            Budget.id == budget_id,
            Budget.user_id == user_id
        ).first()

    def get_budget_by_category(
        self,
        user_id: str,
        category: str,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> Optional[Budget]:
        month, year = resolve_target_period(month, year)
        return self._find_for_period(user_id, category, month, year)

    def _find_for_period(self, user_id: str, category: str, month: int, year: int) -> Optional[Budget]:
        return self.db.query(Budget).filter(
            Budget.user_id == user_id,
            Budget.category == category,
            Budget.month == month,
            Budget.year == year
        ).first()

    def upsert_budget(
        self,
        user_id: str,
        category: str,
        month: int,
        year: int,
        amount: Decimal
    ) -> Tuple[Budget, bool]:
        """
        Set the budget for (category, month, year).

        Updates the amount of an existing budget for that period instead of
        creating a second one. Returns (budget, created).
        """
        budget = self._find_for_period(user_id, category, month, year)
        now = datetime.utcnow()
        created = budget is None
        if created:
            budget = Budget(
                id=str(uuid.uuid4()),
                user_id=user_id,
                category=category,
                month=month,
                year=year,
                amount=amount,
                created_at=now,
                updated_at=now,
            )
            self.db.add(budget)
        else:
            budget.amount = amount
            budget.updated_at = now

        self.db.commit()
        self.db.refresh(budget)
        return budget, created

    def update_budget(self, user_id: str, budget_id: str, updates: Dict[str, Any]) -> Optional[Budget]:
        budget = self.get_budget(user_id, budget_id)
        if not budget:
            return None

        category = updates.get("category", budget.category)
        month = updates.get("month", budget.month)
        year = updates.get("year", budget.year)
        existing = self._find_for_period(user_id, category, month, year)
        if existing and existing.id != budget.id:
            raise BudgetConflictError(
                f"A budget for {category} in {month}/{year} already exists"
            )

        for name in ("category", "amount", "month", "year"):
            if name in updates:
                setattr(budget, name, updates[name])
        budget.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(budget)
        return budget

    def delete_budget(self, user_id: str, budget_id: str) -> bool:
        budget = self.get_budget(user_id, budget_id)
        if not budget:
            return False
        self.db.delete(budget)
        self.db.commit()
        return True

    def merge_remote(self, user_id: str, records: Iterable[Dict[str, Any]]) -> MergeResult:
        """
        Merge cloud budgets into the local cache, cloud data winning.

        A local budget that holds the same (category, month, year) under a
        different id is replaced by the cloud record. Records whose id is
        already owned by another user are skipped.
        """
        result = MergeResult()
        try:
            for record in records:
                if record["user_id"] != user_id:
                    continue
                budget = self.db.query(Budget).filter(Budget.id == record["id"]).first()
                if budget is not None and budget.user_id != user_id:
                    logger.warning(f"Skipping cloud budget {record['id']}: id belongs to another user")
                    continue

                clash = self._find_for_period(user_id, record["category"], record["month"], record["year"])
                if clash is not None and clash.id != record["id"]:
                    logger.info(
                        f"Replacing local budget {clash.id} with cloud budget {record['id']} "
                        f"for {record['category']} {record['month']}/{record['year']}"
                    )
                    self.db.delete(clash)
                    self.db.flush()

                if budget is None:
                    budget = Budget(id=record["id"], user_id=user_id)
                    self.db.add(budget)
                else:
                    result.periods.add((budget.month, budget.year))
                budget.category = record["category"]
                budget.amount = record["amount"]
                budget.month = record["month"]
                budget.year = record["year"]
                budget.created_at = record["created_at"]
                budget.updated_at = record["updated_at"]
                self.db.flush()
                result.merged += 1
                result.periods.add((record["month"], record["year"]))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result
