"""SQLAlchemy model for orders created by checkout."""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from storefront.infrastructure.database import Base

DEFAULT_ORDER_STATUS = "Not Process"

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Order(Base):
    """Order model for database persistence.

    Written once after the gateway settles a sale; never updated here.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    products: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False)
    payment: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=DEFAULT_ORDER_STATUS,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Order(id={self.id}, buyer_id={self.buyer_id})>"
