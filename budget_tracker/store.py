"""
Transaction Store

The single mutable resource of the engine: an ordered, newest-first
collection of transactions backed by a key-value persistence adapter.

DESIGN DECISION: Persistence is an explicit post-mutation step.
`add` and `remove` call `persist()` themselves once the in-memory change
has succeeded; nothing is written behind the caller's back.

Discipline towards storage:
- read once, at startup (`load_from_persistence`)
- write the full collection after every successful mutation
- no retries, no background flushing

Failure policy:
- Invalid drafts raise ValidationError and leave the store untouched
- Corrupt persisted data is discarded; the store starts empty
- Write failures are logged and swallowed; callers see a successful mutation
"""

import json
from datetime import datetime
from typing import Callable, Iterator, Optional
from uuid import uuid4

import structlog
from pydantic import ValidationError as PydanticValidationError

from budget_tracker.audit import AuditLogger
from budget_tracker.errors import CorruptPersistedDataError, ValidationError
from budget_tracker.models.transaction import Transaction, utc_now
from budget_tracker.services.storage import (
    KeyValueStorageInterface,
    StorageError,
)
from budget_tracker.validation import DraftInput, TransactionValidator

logger = structlog.get_logger(__name__)

DEFAULT_STORAGE_KEY = "budgetTransactions"


def _new_id() -> str:
    return str(uuid4())


class TransactionStore:
    """
    Owns the transaction collection.

    There is no module-level instance: whoever builds the store passes it
    to its consumers (normally a BudgetEngine).
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_STORAGE_KEY,
        *,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._storage = storage
        self._key = key
        self._validator = validator or TransactionValidator()
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._id_factory = id_factory
        self._transactions: list[Transaction] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    def __contains__(self, transaction_id: object) -> bool:
        return any(t.id == transaction_id for t in self._transactions)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def dumps(self) -> str:
        """Serialize the collection, in order, as a JSON array."""
        return json.dumps(
            [t.to_record() for t in self._transactions],
            ensure_ascii=False,
        )

    @staticmethod
    def loads(raw: str) -> list[Transaction]:
        """
        Parse a serialized collection.

        Individual malformed fields are tolerated (see Transaction). The
        value as a whole must be a JSON array of objects that each carry an
        id; anything else raises CorruptPersistedDataError. Repeated ids
        keep their first (newest) occurrence.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CorruptPersistedDataError(f"Not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise CorruptPersistedDataError(
                f"Expected a list of transactions, got {type(data).__name__}"
            )

        transactions = []
        seen_ids = set()
        for index, record in enumerate(data):
            if not isinstance(record, dict):
                raise CorruptPersistedDataError(
                    f"Record {index} is not an object"
                )
            try:
                transaction = Transaction.model_validate(record)
            except PydanticValidationError as e:
                raise CorruptPersistedDataError(
                    f"Record {index} is not transaction-shaped: {e.error_count()} errors"
                ) from e
            if transaction.id in seen_ids:
                logger.warning("duplicate_transaction_id_dropped", id=transaction.id)
                continue
            seen_ids.add(transaction.id)
            transactions.append(transaction)
        return transactions

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load_from_persistence(self) -> int:
        """
        Adopt the persisted collection. Called once at startup.

        Never raises: unreadable or corrupt data leaves the store empty.
        Returns the number of transactions loaded.
        """
        try:
            raw = self._storage.read(self._key)
        except StorageError as e:
            self._audit.log_storage_read_failed(self._key, str(e))
            self._transactions = []
            return 0

        if raw is None:
            self._transactions = []
            self._audit.log_store_loaded(self._key, 0)
            return 0

        try:
            self._transactions = self.loads(raw)
        except CorruptPersistedDataError as e:
            self._transactions = []
            self._audit.log_corrupt_data_discarded(self._key, str(e))
            try:
                self._storage.delete(self._key)
            except StorageError as delete_error:
                self._audit.log_error(
                    "corrupt_data_delete_failed",
                    str(delete_error),
                    details={"key": self._key},
                )
            return 0

        self._audit.log_store_loaded(self._key, len(self._transactions))
        return len(self._transactions)

    def persist(self) -> bool:
        """
        Write the full collection to storage.

        Skipped when the collection is empty: an empty store cannot be told
        apart from one that was never initialized. Write failures are logged
        and swallowed.

        Returns True if a write happened.
        """
        if not self._transactions:
            self._audit.log_persist_skipped(self._key)
            return False
        try:
            self._storage.write(self._key, self.dumps())
        except StorageError as e:
            self._audit.log_persist_failed(self._key, str(e), len(self._transactions))
            return False
        return True

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, draft: DraftInput) -> Transaction:
        """
        Validate a draft and prepend the resulting transaction.

        Raises:
            ValidationError: amount, description, date or type is missing or
                invalid. Nothing is changed or written.
        """
        result = self._validator.validate(draft)
        if result.has_errors or result.draft is None:
            self._audit.log_validation_failed(
                [issue.model_dump() for issue in result.issues]
            )
            errors = [issue.message for issue in result.issues if issue.severity == "error"]
            raise ValidationError(
                "; ".join(errors) or "Invalid transaction",
                issues=result.issues,
            )

        for warning in result.warnings:
            logger.info("draft_warning", warning=warning)

        transaction_id = self._id_factory()
        while transaction_id in self:
            transaction_id = self._id_factory()

        transaction = result.draft.to_transaction(
            transaction_id=transaction_id,
            created_at=self._clock(),
        )
        self._transactions.insert(0, transaction)
        self._audit.log_transaction_added(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.effective_amount,
            category=transaction.category,
        )
        self.persist()
        return transaction

    def remove(self, transaction_id: str) -> None:
        """Remove a transaction by id. Unknown ids are ignored."""
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                del self._transactions[index]
                break
        else:
            logger.debug("remove_unknown_id", id=transaction_id)
            return

        self._audit.log_transaction_deleted(transaction_id, len(self._transactions))
        self.persist()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def list(self) -> list[Transaction]:
        """The whole collection, newest first. Returns a copy."""
        return list(self._transactions)
