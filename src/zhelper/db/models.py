from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, Numeric, String, Text, TypeDecorator, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zhelper.db.database import Base
from zhelper.utils.time_utils import utc_now


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC timestamps, also on backends that store them naive (SQLite)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Procurement(Base):
    """One government-procurement entry as tracked by the service."""

    __tablename__ = "procurements"
    __table_args__ = (UniqueConstraint("uin", "fz_number", name="uq_procurement_uin_fz"),)

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    fz_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    uin: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    object_of: Mapped[str | None] = mapped_column(Text)
    publisher_name: Mapped[str | None] = mapped_column(String(512))
    contract_price: Mapped[Decimal | None] = mapped_column(Numeric(19, 2, asdecimal=True))
    procedure_type: Mapped[str | None] = mapped_column(String(255))
    stage: Mapped[str | None] = mapped_column(String(255))

    link_on_placement: Mapped[str | None] = mapped_column(String(1024))
    application_deadline: Mapped[datetime | None] = mapped_column(UtcDateTime())
    application_secure: Mapped[str | None] = mapped_column(String(255))
    contract_secure: Mapped[str | None] = mapped_column(String(255))
    restrictions: Mapped[str | None] = mapped_column(Text)
    last_updated_from_eis: Mapped[datetime | None] = mapped_column(UtcDateTime())
    date_of_placement: Mapped[datetime | None] = mapped_column(UtcDateTime())
    date_of_auction: Mapped[datetime | None] = mapped_column(UtcDateTime())
    time_of_auction: Mapped[str | None] = mapped_column(String(16))
    time_zone: Mapped[str | None] = mapped_column(String(64))
    etp_name: Mapped[str | None] = mapped_column(String(255))
    etp_url: Mapped[str | None] = mapped_column(String(1024))
    summing_up_date: Mapped[datetime | None] = mapped_column(UtcDateTime())

    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime(), nullable=False, default=utc_now, index=True
    )

    def __repr__(self) -> str:
        return f"Procurement(id={self.id!r}, uin={self.uin!r}, fz_number={self.fz_number!r})"


# every column a full-record save copies onto the stored row
PROCUREMENT_REPLACEABLE_FIELDS: tuple[str, ...] = tuple(
    c.key for c in Procurement.__table__.columns if c.key not in {"id", "created_at"}
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # comma-separated role names
    roles: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UtcDateTime(), nullable=False, default=utc_now)

    @property
    def role_names(self) -> frozenset[str]:
        return frozenset(r for r in (self.roles or "").split(",") if r)
