"""SQLAlchemy database models."""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cartplanner.database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ShoppingList(Base):
    """A user's shopping list."""

    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    items: Mapped[list["ShoppingListItemRecord"]] = relationship(
        "ShoppingListItemRecord",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItemRecord.id",
    )


class ShoppingListItemRecord(Base):
    """An item on a shopping list."""

    __tablename__ = "shopping_list_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shopping_list_id: Mapped[str] = mapped_column(
        String, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    normalized_name: Mapped[str] = mapped_column(String, nullable=False)  # dedup key
    quantity: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    purchased: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    shopping_list: Mapped["ShoppingList"] = relationship("ShoppingList", back_populates="items")

    __table_args__ = (
        UniqueConstraint(
            "shopping_list_id",
            "normalized_name",
            name="uq_shopping_list_items_list_name",
        ),
        Index("idx_shopping_list_items_list", "shopping_list_id"),
    )
