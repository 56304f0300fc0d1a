"""
Stateful wrapper around the budget progress calculation.

BudgetProgressService reads complete budget and transaction lists from its
repositories, computes progress, and keeps the last result per
(user, month, year) in a ProgressStore. Subscribers of the store are told
about a new result only when it differs materially from the previous one.
"""

import logging
import threading
from collections import OrderedDict
from typing import Callable, List, Optional, Tuple

from onlyfunds.config import settings
from onlyfunds.schemas.budget import BudgetProgress
from onlyfunds.services.budget_progress import compute_progress, has_progress_changed
from onlyfunds.services.categories import get_category_display_name
from onlyfunds.services.periods import resolve_target_period
from onlyfunds.services.repositories import TransactionRepository, BudgetRepository

logger = logging.getLogger(__name__)

SnapshotKey = Tuple[str, int, int]
ProgressCallback = Callable[[str, int, int, List[BudgetProgress]], None]

DEFAULT_MAX_PERIODS_PER_USER = 24


class ProgressStore:
    """
    Last computed progress per (user, month, year), plus change subscribers.

    Keeps at most max_periods_per_user snapshots per user; the periods
    stored least recently are dropped first.
    """

    def __init__(self, max_periods_per_user: int = DEFAULT_MAX_PERIODS_PER_USER):
        self.max_periods_per_user = max(1, max_periods_per_user)
        self._lock = threading.Lock()
        self._snapshots: "OrderedDict[SnapshotKey, List[BudgetProgress]]" = OrderedDict()
        self._subscribers: List[ProgressCallback] = []

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def get(self, key: SnapshotKey) -> Optional[List[BudgetProgress]]:
        with self._lock:
            return self._snapshots.get(key)

    def put(self, key: SnapshotKey, progress: List[BudgetProgress]) -> bool:
        """Store a snapshot and notify subscribers if it changed. Returns whether it changed."""
        with self._lock:
            previous = self._snapshots.get(key)
            self._snapshots[key] = progress
            self._snapshots.move_to_end(key)
            self._evict(key[0])
            changed = has_progress_changed(previous, progress)
            subscribers = list(self._subscribers) if changed else []

        user_id, month, year = key
        for callback in subscribers:
            try:
                callback(user_id, month, year, progress)
            except Exception as e:
                logger.error(f"Budget progress subscriber {callback!r} failed: {e}")
        return changed

    def _evict(self, user_id: str) -> None:
        user_keys = [k for k in self._snapshots if k[0] == user_id]
        for stale in user_keys[:-self.max_periods_per_user]:
            del self._snapshots[stale]

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()


class BudgetProgressService:

    def __init__(
        self,
        transactions: TransactionRepository,
        budgets: BudgetRepository,
        store: ProgressStore
    ):
        self.transactions = transactions
        self.budgets = budgets
        self.store = store

    def refresh(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> List[BudgetProgress]:
        """Recompute progress for a period from the repositories and cache it."""
        month, year = resolve_target_period(month, year)
        progress = compute_progress(
            self.budgets.get_budgets(user_id),
            self.transactions.get_transactions(user_id),
            month,
            year,
        )
        self.store.put((user_id, month, year), progress)
        return progress

    def get_snapshot(
        self,
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> Optional[List[BudgetProgress]]:
        month, year = resolve_target_period(month, year)
        return self.store.get((user_id, month, year))


def log_budget_alerts(user_id: str, month: int, year: int, progress: List[BudgetProgress]) -> None:
    """Log categories that went over budget or are close to their limit."""
    for item in progress:
        label = get_category_display_name(item.category)
        if item.is_over_budget:
            logger.warning(
                f"User {user_id} is over budget for {label} in {month}/{year}: "
                f"spent {item.spent_amount} of {item.budget_amount}"
            )
        elif item.percentage_used >= settings.budget_warning_threshold:
            logger.info(
                f"User {user_id} has used {item.percentage_used}% of the {label} budget in {month}/{year}"
            )


_progress_store: Optional[ProgressStore] = None


def get_progress_store() -> ProgressStore:
    global _progress_store
    if _progress_store is None:
        _progress_store = ProgressStore(settings.progress_snapshot_periods)
    return _progress_store
