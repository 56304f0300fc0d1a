"""Best-effort synchronisation between the local cache and the cloud backend."""

import logging
from datetime import datetime, date, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from onlyfunds.models.budget import Budget
from onlyfunds.models.transaction import Transaction, TransactionType
from onlyfunds.services.cloud import CloudClient, CloudSyncError, get_cloud_client
from onlyfunds.services.repositories import MergeResult, TransactionRepository, BudgetRepository

logger = logging.getLogger(__name__)


def _iso(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date(value: str) -> date:
    if len(value) == 10:
        return date.fromisoformat(value)
    return _parse_datetime(value).date()


def transaction_to_document(transaction: Transaction) -> Dict[str, Any]:
    return {
        "id": transaction.id,
        "userId": transaction.user_id,
        "type": transaction.type.value,
        "amount": float(transaction.amount),
        "description": transaction.description,
        "category": transaction.category,
        "date": transaction.date.isoformat(),
        "createdAt": _iso(transaction.created_at),
        # Transactions are never edited, so the last update is the creation time
        "updatedAt": _iso(transaction.created_at),
    }


def document_to_transaction_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": doc["id"],
        "user_id": doc["userId"],
        "type": TransactionType(doc["type"]),
        "amount": Decimal(str(doc["amount"])),
        "description": doc.get("description") or "",
        "category": doc["category"],
        "date": _parse_date(doc["date"]),
        "created_at": _parse_datetime(doc["createdAt"]),
    }


def budget_to_document(budget: Budget) -> Dict[str, Any]:
    return {
        "id": budget.id,
        "userId": budget.user_id,
        "category": budget.category,
        "amount": float(budget.amount),
        "month": budget.month,
        "year": budget.year,
        "createdAt": _iso(budget.created_at),
        "updatedAt": _iso(budget.updated_at),
    }


def document_to_budget_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": doc["id"],
        "user_id": doc["userId"],
        "category": doc["category"],
        "amount": Decimal(str(doc["amount"])),
        "month": int(doc["month"]),
        "year": int(doc["year"]),
        "created_at": _parse_datetime(doc["createdAt"]),
        "updated_at": _parse_datetime(doc["updatedAt"]),
    }


async def push_transaction(document: Dict[str, Any], client: Optional[CloudClient] = None) -> bool:
    """Save a new transaction to the cloud. Failures are logged, never raised."""
    client = client or get_cloud_client()
    if not client.is_configured:
        logger.warning("Cloud backend not configured, skipping cloud save")
        return False

    try:
        await client.create_document(client.transactions_collection, document)
        return True
    except CloudSyncError as e:
        # The transaction is still saved locally
        logger.error(f"Failed to sync transaction {document['id']} to cloud: {e}")
        return False


async def delete_remote_transaction(transaction_id: str, client: Optional[CloudClient] = None) -> bool:
    client = client or get_cloud_client()
    if not client.is_configured:
        logger.warning("Cloud backend not configured, skipping cloud delete")
        return False

    try:
        doc = await client.find_document(client.transactions_collection, transaction_id)
        if doc is None:
            logger.warning(f"Transaction not found in cloud for deletion: {transaction_id}")
            return False
        await client.delete_document(client.transactions_collection, doc["$id"])
        return True
    except CloudSyncError as e:
        logger.error(f"Failed to delete transaction {transaction_id} from cloud: {e}")
        return False


async def push_budget(document: Dict[str, Any], client: Optional[CloudClient] = None) -> bool:
    """Create or update a budget in the cloud. Failures are logged, never raised."""
    client = client or get_cloud_client()
    if not client.is_configured:
        logger.warning("Cloud backend not configured, skipping cloud save")
        return False

    try:
        existing = await client.find_document(client.budgets_collection, document["id"])
        if existing is None:
            await client.create_document(client.budgets_collection, document)
        else:
            updates = {k: v for k, v in document.items() if k not in ("id", "userId", "createdAt")}
            await client.update_document(client.budgets_collection, existing["$id"], updates)
        return True
    except CloudSyncError as e:
        logger.error(f"Failed to sync budget {document['id']} to cloud: {e}")
        return False


async def delete_remote_budget(budget_id: str, client: Optional[CloudClient] = None) -> bool:
    client = client or get_cloud_client()
    if not client.is_configured:
        logger.warning("Cloud backend not configured, skipping cloud delete")
        return False

    try:
        doc = await client.find_document(client.budgets_collection, budget_id)
        if doc is None:
            logger.warning(f"Budget not found in cloud for deletion: {budget_id}")
            return False
        await client.delete_document(client.budgets_collection, doc["$id"])
        return True
    except CloudSyncError as e:
        logger.error(f"Failed to delete budget {budget_id} from cloud: {e}")
        return False


_MALFORMED_DOCUMENT_ERRORS = (KeyError, TypeError, ValueError, InvalidOperation)


async def _pull_records(
    client: CloudClient,
    collection: str,
    user_id: str,
    to_record: Callable[[Dict[str, Any]], Dict[str, Any]],
    kind: str
) -> Optional[List[Dict[str, Any]]]:
    """Fetch a user's documents and convert them, skipping malformed ones. None on failure."""
    try:
        documents = await client.list_user_documents(collection, user_id)
    except CloudSyncError as e:
        logger.error(f"Failed to sync {kind} from cloud for user {user_id}: {e}")
        return None

    records = []
    for doc in documents:
        try:
            records.append(to_record(doc))
        except _MALFORMED_DOCUMENT_ERRORS as e:
            logger.warning(f"Skipping malformed cloud {kind} document {doc.get('$id')}: {e!r}")
    return records


async def sync_transactions_to_local(
    db: Session,
    user_id: str,
    client: Optional[CloudClient] = None
) -> MergeResult:
    """
    Pull the user's cloud transactions into the local cache.

    Cloud records win on id clashes and local-only records are kept.
    Returns how many cloud records were merged and the periods they
    touched (an empty result on failure).
    """
    client = client or get_cloud_client()
    if not client.is_configured:
        return MergeResult()

    records = await _pull_records(
        client, client.transactions_collection, user_id, document_to_transaction_record, "transactions"
    )
    if not records:
        return MergeResult()

    try:
        result = TransactionRepository(db).merge_remote(user_id, records)
    except SQLAlchemyError as e:
        logger.error(f"Failed to sync transactions from cloud for user {user_id}: {e}")
        return MergeResult()

    logger.info(f"Merged {result.merged} cloud transactions for user {user_id}")
    return result


async def sync_budgets_to_local(
    db: Session,
    user_id: str,
    client: Optional[CloudClient] = None
) -> MergeResult:
    """Pull the user's cloud budgets into the local cache. See sync_transactions_to_local."""
    client = client or get_cloud_client()
    if not client.is_configured:
        return MergeResult()

    records = await _pull_records(
        client, client.budgets_collection, user_id, document_to_budget_record, "budgets"
    )
    if not records:
        return MergeResult()

    try:
        result = BudgetRepository(db).merge_remote(user_id, records)
    except SQLAlchemyError as e:
        logger.error(f"Failed to sync budgets from cloud for user {user_id}: {e}")
        return MergeResult()

    logger.info(f"Merged {result.merged} cloud budgets for user {user_id}")
    return result
