from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.orm import Session

from masterdata.errors import DuplicateIdError, ValidationError
from masterdata.models import Account, InvoiceCadence
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

ID_PREFIX = 'A'
DUPLICATE_ID_MESSAGE = '이미 존재하는 거래처 ID입니다.'

ACCOUNT_COLUMNS = (
    'name',
    'print_name',
    'registration_number',
    'representative',
    'resident_registration_number',
    'phone',
    'fax',
    'address',
    'postal_code',
    'business_type',
    'business_category',
    'electronic_invoice_input',
    'email',
    'collection_date',
    'remarks',
    'closing_date',
    'invoice',
    'contact_person',
    'contact_person_phone',
)

SEARCH_COLUMNS = [Account.name, Account.representative, Account.phone]
EXACT_COLUMNS = {
    'business_type': Account.business_type,
    'business_category': Account.business_category,
}

_NON_DIGIT_RE = re.compile(r'\D')


def validate_registration_number(value: str | None) -> None:
    if value and len(_NON_DIGIT_RE.sub('', value)) != 10:
        raise ValidationError('사업자등록번호는 10자리 숫자여야 합니다.')


def _validate_invoice(value: str | None) -> None:
    if value and value not in {cadence.value for cadence in InvoiceCadence}:
        raise ValidationError('계산서 발행 구분은 월말 또는 즉시여야 합니다.')


def list_accounts(db: Session, *, filters: ListFilter) -> tuple[list[Account], int]:
    conditions = build_conditions(filters, search_columns=SEARCH_COLUMNS, exact_columns=EXACT_COLUMNS)
    query = where_all(select(Account), conditions)
    rows = db.execute(
        paginate(query, filters, order_by=[Account.created_at.desc(), Account.id.desc()])
    ).scalars().all()
    return list(rows), count_matching(db, query)


def get_account(db: Session, account_id: str) -> Account | None:
    return fetch_by_id(db, Account, account_id)


def account_exists(db: Session, account_id: str) -> bool:
    return exists_by_id(db, Account, account_id)


def create_account(db: Session, *, values: dict, created_by: str | None = None) -> Account:
    name = clean_text(values.get('name'))
    if not name:
        raise ValidationError('필수 필드(name)가 누락되었습니다.')

    account_id = clean_text(values.get('id'))
    if not account_id:
        account_id = next_generated_id(db, Account, ID_PREFIX)
    if account_exists(db, account_id):
        raise DuplicateIdError(DUPLICATE_ID_MESSAGE)

    payload = {column: clean_text(values.get(column)) for column in ACCOUNT_COLUMNS}
    payload['name'] = name
    validate_registration_number(payload['registration_number'])
    _validate_invoice(payload['invoice'])

    insert_row(
        db,
        Account,
        {'id': account_id, 'created_by': clean_text(created_by), **payload},
        duplicate_message=DUPLICATE_ID_MESSAGE,
    )
    return get_account(db, account_id)


def update_account(db: Session, account_id: str, *, values: dict) -> Account | None:
    changes = {
        key: clean_text(value)
        for key, value in values.items()
        if key in ACCOUNT_COLUMNS or key in {'id', 'updated_by'}
    }
    if 'name' in changes and not changes['name']:
        raise ValidationError('거래처명을 입력해주세요.')
    validate_registration_number(changes.get('registration_number'))
    _validate_invoice(changes.get('invoice'))

    read_id = apply_partial_update(db, Account, account_id, changes, duplicate_message=DUPLICATE_ID_MESSAGE)
    return get_account(db, read_id or account_id)


def delete_account(db: Session, account_id: str, *, updated_by: str | None = None) -> bool:
    return hard_delete(db, Account, account_id)
