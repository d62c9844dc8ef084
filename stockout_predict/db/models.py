"""SQLAlchemy models for Stockout Predict."""

from datetime import datetime
from decimal import Decimal
from enum import IntEnum

from sqlalchemy import Boolean, DateTime, Integer, Numeric, SmallInteger, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class ConfigValue(Base):
    """Persisted configuration entry, one serialized value per path."""

    __tablename__ = "config_values"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    path: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<ConfigValue(path={self.path})>"


class Flag(Base):
    """Generic flag row; the prediction gate uses it for per-SKU cooldowns."""

    __tablename__ = "flags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flag_code: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    state: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    flag_data: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON string
    last_update: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Flag(flag_code={self.flag_code}, last_update={self.last_update})>"


class NotificationSeverity(IntEnum):
    """Admin notification severities."""
    CRITICAL = 1
    MAJOR = 2
    MINOR = 3
    NOTICE = 4


class AdminNotification(Base):
    """Operator-facing inbox notification."""

    __tablename__ = "admin_notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    severity: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=NotificationSeverity.NOTICE
    )
    date_added: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<AdminNotification(id={self.id}, title={self.title})>"


class SalesOrderItem(Base):
    """Historical order line."""

    __tablename__ = "sales_order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    product_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sku: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    qty_ordered: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )

    def __repr__(self) -> str:
        return f"<SalesOrderItem(order_id={self.order_id}, sku={self.sku})>"


class StockItem(Base):
    """Current stock level for a product."""

    __tablename__ = "stock_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    qty: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<StockItem(product_id={self.product_id}, qty={self.qty})>"
