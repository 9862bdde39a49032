from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from masterdata.errors import DuplicateIdError, ValidationError
from masterdata.models import Account, Field
from masterdata.services.account_service import account_exists
from masterdata.services.master_data import (
    ListFilter,
    apply_partial_update,
    build_conditions,
    clean_text,
    count_matching,
    exists_by_id,
    hard_delete,
    insert_row,
    next_generated_id,
    paginate,
    where_all,
)

ID_PREFIX = 'F'
DUPLICATE_ID_MESSAGE = '이미 존재하는 현장 ID입니다.'
UNKNOWN_ACCOUNT_MESSAGE = '존재하지 않는 거래처입니다.'

FIELD_COLUMNS = ('account_id', 'field_name')

SEARCH_COLUMNS = [Field.field_name, Account.name, Field.account_id]
EXACT_COLUMNS = {'account_id': Field.account_id}


def _joined_query():
    return select(Field, Account.name.label('account_name')).outerjoin(Account, Account.id == Field.account_id)


def _as_record(field: Field, account_name: str | None) -> dict:
    return {
        'id': field.id,
        'account_id': field.account_id,
        'account_name': account_name,
        'field_name': field.field_name,
        'created_at': field.created_at,
        'updated_at': field.updated_at,
        'created_by': field.created_by,
        'updated_by': field.updated_by,
    }


def list_fields(db: Session, *, filters: ListFilter) -> tuple[list[dict], int]:
    conditions = build_conditions(filters, search_columns=SEARCH_COLUMNS, exact_columns=EXACT_COLUMNS)
    query = where_all(_joined_query(), conditions)
    rows = db.execute(paginate(query, filters, order_by=[Field.created_at.desc(), Field.id.desc()])).all()
    return [_as_record(field, account_name) for field, account_name in rows], count_matching(db, query)


def get_field(db: Session, field_id: str) -> dict | None:
    row = db.execute(
        _joined_query().where(Field.id == field_id).execution_options(populate_existing=True)
    ).one_or_none()
    if not row:
        return None
    field, account_name = row
    return _as_record(field, account_name)


def field_exists(db: Session, field_id: str) -> bool:
    return exists_by_id(db, Field, field_id)


def _ensure_account(db: Session, account_id: str) -> None:
    if not account_exists(db, account_id):
        raise ValidationError(UNKNOWN_ACCOUNT_MESSAGE)


def create_field(db: Session, *, values: dict, created_by: str | None = None) -> dict:
    account_id = clean_text(values.get('account_id'))
    field_name = clean_text(values.get('field_name'))
    if not account_id or not field_name:
        raise ValidationError('필수 필드(accountId, fieldName)가 누락되었습니다.')
    _ensure_account(db, account_id)

    field_id = clean_text(values.get('id')) or next_generated_id(db, Field, ID_PREFIX)
    if field_exists(db, field_id):
        raise DuplicateIdError(DUPLICATE_ID_MESSAGE)

    insert_row(
        db,
        Field,
        {
            'id': field_id,
            'account_id': account_id,
            'field_name': field_name,
            'created_by': clean_text(created_by),
        },
        duplicate_message=DUPLICATE_ID_MESSAGE,
    )
    return get_field(db, field_id)


def update_field(db: Session, field_id: str, *, values: dict) -> dict | None:
    changes = {
        key: clean_text(value)
        for key, value in values.items()
        if key in FIELD_COLUMNS or key in {'id', 'updated_by'}
    }
    if 'account_id' in changes:
        if not changes['account_id']:
            raise ValidationError('거래처를 선택해주세요.')
        _ensure_account(db, changes['account_id'])
    if 'field_name' in changes and not changes['field_name']:
        raise ValidationError('현장명을 입력해주세요.')

    read_id = apply_partial_update(db, Field, field_id, changes, duplicate_message=DUPLICATE_ID_MESSAGE)
    return get_field(db, read_id or field_id)


def delete_field(db: Session, field_id: str, *, updated_by: str | None = None) -> bool:
    return hard_delete(db, Field, field_id)
