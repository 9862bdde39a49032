from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, Enum as SQLEnum, Index, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    pass


class UserGrade(str, Enum):
    GENERAL = 'general'
    ADMIN = 'admin'


class UserStatus(str, Enum):
    ACTIVE = 'active'
    DELETED = 'deleted'


class InvoiceCadence(str, Enum):
    MONTH_END = '월말'
    IMMEDIATE = '즉시'


class AuditColumnsMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()
    )
    created_by: Mapped[str | None] = mapped_column(String(50))
    updated_by: Mapped[str | None] = mapped_column(String(50))


class User(AuditColumnsMixin, Base):
    __tablename__ = 'users'

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    grade: Mapped[UserGrade] = mapped_column(
        SQLEnum(UserGrade, name='user_grade', values_callable=_enum_values),
        nullable=False,
        default=UserGrade.GENERAL,
    )
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(20))
    password_hash: Mapped[str | None] = mapped_column(Text)
    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus, name='user_status', values_callable=_enum_values),
        nullable=False,
        default=UserStatus.ACTIVE,
        server_default=UserStatus.ACTIVE.value,
    )

    __table_args__ = (
        Index('ix_users_status', 'status'),
        Index('ix_users_email', 'email'),
    )


class Account(AuditColumnsMixin, Base):
    __tablename__ = 'accounts'

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    print_name: Mapped[str | None] = mapped_column(String(200))
    registration_number: Mapped[str | None] = mapped_column(String(20))
    representative: Mapped[str | None] = mapped_column(String(100))
    resident_registration_number: Mapped[str | None] = mapped_column(String(20))
    phone: Mapped[str | None] = mapped_column(String(20))
    fax: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(Text)
    postal_code: Mapped[str | None] = mapped_column(String(10))
    business_type: Mapped[str | None] = mapped_column(String(100))
    business_category: Mapped[str | None] = mapped_column(String(100))
    electronic_invoice_input: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255))
    collection_date: Mapped[str | None] = mapped_column(String(20))
    remarks: Mapped[str | None] = mapped_column(Text)
    closing_date: Mapped[str | None] = mapped_column(String(20))
    invoice: Mapped[str | None] = mapped_column(String(10))
    contact_person: Mapped[str | None] = mapped_column(String(100))
    contact_person_phone: Mapped[str | None] = mapped_column(String(20))

    __table_args__ = (
        Index('ix_accounts_business_type', 'business_type'),
        Index('ix_accounts_created_at', 'created_at'),
    )


class PurchaseAccount(AuditColumnsMixin, Base):
    __tablename__ = 'purchase_accounts'

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    print_name: Mapped[str | None] = mapped_column(String(200))
    representative: Mapped[str | None] = mapped_column(String(100))
    address: Mapped[str | None] = mapped_column(Text)
    postal_code: Mapped[str | None] = mapped_column(String(10))
    phone: Mapped[str | None] = mapped_column(String(20))
    registration_number: Mapped[str | None] = mapped_column(String(20))
    fax: Mapped[str | None] = mapped_column(String(20))
    business_type: Mapped[str | None] = mapped_column(String(100))
    business_category: Mapped[str | None] = mapped_column(String(100))
    remarks: Mapped[str | None] = mapped_column(Text)
    deposit_account: Mapped[str | None] = mapped_column(String(100))
    payment_date: Mapped[str | None] = mapped_column(String(20))
    closing_date: Mapped[str | None] = mapped_column(String(20))

    __table_args__ = (
        Index('ix_purchase_accounts_business_type', 'business_type'),
        Index('ix_purchase_accounts_created_at', 'created_at'),
    )


class Field(AuditColumnsMixin, Base):
    __tablename__ = 'fields'

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    # References accounts.id at the application boundary only; orphans are readable.
    account_id: Mapped[str] = mapped_column(String(20), nullable=False)
    field_name: Mapped[str] = mapped_column(String(200), nullable=False)

    __table_args__ = (
        Index('ix_fields_account_id', 'account_id'),
        Index('ix_fields_created_at', 'created_at'),
    )
