from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from masterdata.models import UserGrade, UserStatus

AUDIT_FIELDS = {'created_at', 'updated_at', 'created_by', 'updated_by'}


def api_alias(name: str) -> str:
    # Audit columns keep their snake_case names on the wire.
    return name if name in AUDIT_FIELDS else to_camel(name)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=api_alias, populate_by_name=True, from_attributes=True)


# Inputs: every attribute is optional so that required-field checks answer with
# the 400 envelope, and update payloads keep track of which keys were sent.


class UserCreate(ApiModel):
    id: str | None = None
    name: str | None = None
    grade: str | None = None
    department: str | None = None
    email: str | None = None
    phone: str | None = None
    password: str | None = None
    created_by: str | None = None


class UserUpdate(ApiModel):
    id: str | None = None
    name: str | None = None
    grade: str | None = None
    department: str | None = None
    email: str | None = None
    phone: str | None = None
    password: str | None = None
    updated_by: str | None = None


class AccountFields(ApiModel):
    id: str | None = None
    name: str | None = None
    print_name: str | None = None
    registration_number: str | None = None
    representative: str | None = None
    resident_registration_number: str | None = None
    phone: str | None = None
    fax: str | None = None
    address: str | None = None
    postal_code: str | None = None
    business_type: str | None = None
    business_category: str | None = None
    electronic_invoice_input: str | None = None
    email: str | None = None
    collection_date: str | None = None
    remarks: str | None = None
    closing_date: str | None = None
    invoice: str | None = None
    contact_person: str | None = None
    contact_person_phone: str | None = None


class AccountCreate(AccountFields):
    created_by: str | None = None


class AccountUpdate(AccountFields):
    updated_by: str | None = None


class PurchaseAccountFields(ApiModel):
    id: str | None = None
    name: str | None = None
    print_name: str | None = None
    representative: str | None = None
    address: str | None = None
    postal_code: str | None = None
    phone: str | None = None
    registration_number: str | None = None
    fax: str | None = None
    business_type: str | None = None
    business_category: str | None = None
    remarks: str | None = None
    deposit_account: str | None = None
    payment_date: str | None = None
    closing_date: str | None = None


class PurchaseAccountCreate(PurchaseAccountFields):
    created_by: str | None = None


class PurchaseAccountUpdate(PurchaseAccountFields):
    updated_by: str | None = None


class FieldCreate(ApiModel):
    id: str | None = None
    account_id: str | None = None
    field_name: str | None = None
    created_by: str | None = None


class FieldUpdate(ApiModel):
    id: str | None = None
    account_id: str | None = None
    field_name: str | None = None
    updated_by: str | None = None


class AuditedOut(ApiModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class UserOut(AuditedOut):
    id: str
    name: str
    grade: UserGrade
    department: str
    email: str | None = None
    phone: str | None = None
    status: UserStatus


class AccountOut(AuditedOut, AccountFields):
    id: str
    name: str


class PurchaseAccountOut(AuditedOut, PurchaseAccountFields):
    id: str
    name: str


class FieldOut(AuditedOut):
    id: str
    account_id: str
    account_name: str | None = None
    field_name: str
