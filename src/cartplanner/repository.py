"""SQL-backed shopping-list store."""

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from tenacity import (
    RetryError,
    after_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from cartplanner.config import get_settings
from cartplanner.database import get_session_factory
from cartplanner.exceptions import DuplicateInsertError
from cartplanner.logging_config import get_logger
from cartplanner.models import ShoppingList, ShoppingListItemRecord
from cartplanner.plan.shopping_list import ShoppingListItem
from cartplanner.plan.sources import ShoppingListStore
from cartplanner.schemas import ShoppingListItemRead

logger = get_logger(__name__)


def merge_items(items: Sequence[ShoppingListItem]) -> list[ShoppingListItem]:
    """
    Collapse items sharing a normalized name into one row.

    An ingredient needed in two unit families ("2 cups" and "1 can" of
    broth) becomes a single item with quantity "2 cups + 1 can".
    """
    merged: dict[str, ShoppingListItem] = {}
    for item in items:
        existing = merged.get(item.normalized_name)
        if existing is None:
            merged[item.normalized_name] = ShoppingListItem(
                name=item.name,
                quantity=item.quantity,
                category=item.category,
                normalized_name=item.normalized_name,
            )
            continue
        existing.quantity = f"{existing.quantity} + {item.quantity}"
        existing.category = existing.category or item.category
    return list(merged.values())


class SqlShoppingListStore(ShoppingListStore):
    """
    Shopping-list store on SQLAlchemy.

    A unique constraint on (list, normalized name) guards against two
    generations racing on the same list. A conflicting insert is rolled
    back and retried once against a fresh read of the list.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        retry_attempts: int | None = None,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.retry_attempts = retry_attempts or get_settings().insert_retry_attempts

    def create_list(self, name: str, list_id: str | None = None) -> str:
        """Create an empty shopping list and return its ID."""
        list_id = list_id or str(uuid.uuid4())
        with self.session_factory() as session, session.begin():
            session.add(ShoppingList(id=list_id, name=name))
        logger.info(f"Created shopping list {list_id} ({name})")
        return list_id

    def existing_item_names(self, list_id: str) -> list[str]:
        with self.session_factory() as session:
            rows = session.scalars(
                select(ShoppingListItemRecord.name)
                .where(ShoppingListItemRecord.shopping_list_id == list_id)
                .order_by(ShoppingListItemRecord.id)
            )
            return list(rows)

    def list_items(self, list_id: str) -> list[ShoppingListItemRead]:
        """Items on a list in insertion order."""
        with self.session_factory() as session:
            records = session.scalars(
                select(ShoppingListItemRecord)
                .where(ShoppingListItemRecord.shopping_list_id == list_id)
                .order_by(ShoppingListItemRecord.id)
            )
            return [ShoppingListItemRead.model_validate(record) for record in records]

    def add_items(self, list_id: str, items: Sequence[ShoppingListItem]) -> int:
        rows = merge_items(items)
        if not rows:
            return 0

        @retry(
            retry=retry_if_exception_type(IntegrityError),
            stop=stop_after_attempt(self.retry_attempts),
            after=after_log(logger, logging.WARNING),
            reraise=False,
        )
        def _insert_with_retry() -> int:
            return self._insert(list_id, rows)

        try:
            inserted = _insert_with_retry()
        except RetryError as e:
            names = [row.normalized_name for row in rows]
            logger.error(f"Insert into list {list_id} still conflicts after retry")
            raise DuplicateInsertError(list_id, names) from e.last_attempt.exception()

        logger.info(f"Inserted {inserted} items into list {list_id}")
        return inserted

    def _existing_normalized(self, session: Session, list_id: str) -> set[str]:
        rows = session.scalars(
            select(ShoppingListItemRecord.normalized_name).where(
                ShoppingListItemRecord.shopping_list_id == list_id
            )
        )
        return set(rows)

    def _insert(self, list_id: str, rows: list[ShoppingListItem]) -> int:
        """Insert rows not yet on the list in one transaction."""
        with self.session_factory() as session, session.begin():
            existing = self._existing_normalized(session, list_id)
            new_rows = [row for row in rows if row.normalized_name not in existing]
            session.add_all(
                ShoppingListItemRecord(
                    shopping_list_id=list_id,
                    name=row.name,
                    normalized_name=row.normalized_name,
                    quantity=row.quantity,
                    category=row.category,
                )
                for row in new_rows
            )
        return len(new_rows)
