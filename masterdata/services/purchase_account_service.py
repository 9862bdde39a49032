from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from masterdata.errors import DuplicateIdError, ValidationError
from masterdata.models import PurchaseAccount
from masterdata.services.account_service import validate_registration_number
from masterdata.services.master_data import (
    ListFilter,
    apply_partial_update,
    build_conditions,
    clean_text,
    count_matching,
    exists_by_id,
    fetch_by_id,
    hard_delete,
    insert_row,
    next_generated_id,
    paginate,
    where_all,
)

ID_PREFIX = 'P'
DUPLICATE_ID_MESSAGE = '이미 존재하는 거래처 ID입니다.'

PURCHASE_ACCOUNT_COLUMNS = (
    'name',
    'print_name',
    'representative',
    'address',
    'postal_code',
    'phone',
    'registration_number',
    'fax',
    'business_type',
    'business_category',
    'remarks',
    'deposit_account',
    'payment_date',
    'closing_date',
)

SEARCH_COLUMNS = [PurchaseAccount.name, PurchaseAccount.representative, PurchaseAccount.phone]
EXACT_COLUMNS = {
    'business_type': PurchaseAccount.business_type,
    'business_category': PurchaseAccount.business_category,
}


def list_purchase_accounts(db: Session, *, filters: ListFilter) -> tuple[list[PurchaseAccount], int]:
    conditions = build_conditions(filters, search_columns=SEARCH_COLUMNS, exact_columns=EXACT_COLUMNS)
    query = where_all(select(PurchaseAccount), conditions)
    rows = db.execute(
        paginate(query, filters, order_by=[PurchaseAccount.created_at.desc(), PurchaseAccount.id.desc()])
    ).scalars().all()
    return list(rows), count_matching(db, query)


def get_purchase_account(db: Session, account_id: str) -> PurchaseAccount | None:
    return fetch_by_id(db, PurchaseAccount, account_id)


def purchase_account_exists(db: Session, account_id: str) -> bool:
    return exists_by_id(db, PurchaseAccount, account_id)


def create_purchase_account(db: Session, *, values: dict, created_by: str | None = None) -> PurchaseAccount:
    name = clean_text(values.get('name'))
    if not name:
        raise ValidationError('필수 필드(name)가 누락되었습니다.')

    account_id = clean_text(values.get('id')) or next_generated_id(db, PurchaseAccount, ID_PREFIX)
    if purchase_account_exists(db, account_id):
        raise DuplicateIdError(DUPLICATE_ID_MESSAGE)

    payload = {column: clean_text(values.get(column)) for column in PURCHASE_ACCOUNT_COLUMNS}
    payload['name'] = name
    validate_registration_number(payload['registration_number'])

    insert_row(
        db,
        PurchaseAccount,
        {'id': account_id, 'created_by': clean_text(created_by), **payload},
        duplicate_message=DUPLICATE_ID_MESSAGE,
    )
    return get_purchase_account(db, account_id)


def update_purchase_account(db: Session, account_id: str, *, values: dict) -> PurchaseAccount | None:
    changes = {
        key: clean_text(value)
        for key, value in values.items()
        if key in PURCHASE_ACCOUNT_COLUMNS or key in {'id', 'updated_by'}
    }
    if 'name' in changes and not changes['name']:
        raise ValidationError('거래처명을 입력해주세요.')
    validate_registration_number(changes.get('registration_number'))

    read_id = apply_partial_update(
        db, PurchaseAccount, account_id, changes, duplicate_message=DUPLICATE_ID_MESSAGE
    )
    return get_purchase_account(db, read_id or account_id)


def delete_purchase_account(db: Session, account_id: str, *, updated_by: str | None = None) -> bool:
    return hard_delete(db, PurchaseAccount, account_id)
