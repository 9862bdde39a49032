from __future__ import annotations

import logging
from datetime import datetime, timezone

from pwdlib import PasswordHash
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from masterdata.errors import DuplicateEmailError, DuplicateIdError, ValidationError
from masterdata.models import User, UserGrade, UserStatus
from masterdata.services.master_data import (
    ListFilter,
    apply_partial_update,
    build_conditions,
    clean_text,
    count_matching,
    exists_by_id,
    fetch_by_id,
    insert_row,
    paginate,
    where_all,
)

logger = logging.getLogger(__name__)

DUPLICATE_ID_MESSAGE = '이미 존재하는 사용자 ID입니다.'
DUPLICATE_EMAIL_MESSAGE = '이미 사용 중인 이메일입니다.'
STATUS_ALL = 'all'

USER_COLUMNS = ('name', 'grade', 'department', 'email', 'phone')

SEARCH_COLUMNS = [User.name, User.email, User.department]
EXACT_COLUMNS = {
    'department': User.department,
    'grade': User.grade,
    'status': User.status,
}

password_hash = PasswordHash.recommended()


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def hash_password(raw_password: str) -> str:
    return password_hash.hash(raw_password)


def _parse_grade(value: object) -> UserGrade:
    try:
        return UserGrade(clean_text(value))
    except ValueError as exc:
        raise ValidationError('등급은 general 또는 admin이어야 합니다.') from exc


def list_users(db: Session, *, filters: ListFilter) -> tuple[list[User], int]:
    exact = dict(filters.exact)
    status = exact.pop('status', None) or UserStatus.ACTIVE.value
    if status != STATUS_ALL:
        exact['status'] = status
    scoped = ListFilter(page=filters.page, limit=filters.limit, search=filters.search, exact=exact)

    conditions = [User.status != UserStatus.DELETED]
    conditions += build_conditions(scoped, search_columns=SEARCH_COLUMNS, exact_columns=EXACT_COLUMNS)
    query = where_all(select(User), conditions)
    rows = db.execute(
        paginate(query, scoped, order_by=[User.created_at.desc(), User.id.desc()])
    ).scalars().all()
    return list(rows), count_matching(db, query)


def get_user(db: Session, user_id: str) -> User | None:
    return fetch_by_id(db, User, user_id)


def user_exists(db: Session, user_id: str) -> bool:
    return exists_by_id(db, User, user_id)


def user_email_exists(db: Session, email: str, *, exclude_id: str | None = None) -> bool:
    query = select(func.count()).select_from(User).where(User.email == email, User.status != UserStatus.DELETED)
    if exclude_id:
        query = query.where(User.id != exclude_id)
    return db.execute(query).scalar_one() > 0


def create_user(db: Session, *, values: dict, created_by: str | None = None) -> User:
    user_id = clean_text(values.get('id'))
    name = clean_text(values.get('name'))
    department = clean_text(values.get('department'))
    if not user_id or not name or not clean_text(values.get('grade')) or not department:
        raise ValidationError('필수 필드(id, name, grade, department)가 누락되었습니다.')
    grade = _parse_grade(values.get('grade'))

    if user_exists(db, user_id):
        raise DuplicateIdError(DUPLICATE_ID_MESSAGE)

    email = clean_text(values.get('email'))
    if email and user_email_exists(db, email):
        raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)

    raw_password = clean_text(values.get('password'))
    insert_row(
        db,
        User,
        {
            'id': user_id,
            'name': name,
            'grade': grade,
            'department': department,
            'email': email,
            'phone': clean_text(values.get('phone')),
            'password_hash': hash_password(raw_password) if raw_password else None,
            'status': UserStatus.ACTIVE,
            'created_by': clean_text(created_by),
        },
        duplicate_message=DUPLICATE_ID_MESSAGE,
    )
    return get_user(db, user_id)


def update_user(db: Session, user_id: str, *, values: dict) -> User | None:
    changes = {
        key: clean_text(value)
        for key, value in values.items()
        if key in USER_COLUMNS or key in {'id', 'updated_by'}
    }
    for required in ('name', 'department'):
        if required in changes and not changes[required]:
            raise ValidationError('사용자명과 부서는 비워둘 수 없습니다.')
    if 'grade' in changes:
        changes['grade'] = _parse_grade(changes['grade'])
    if changes.get('email') and user_email_exists(db, changes['email'], exclude_id=user_id):
        raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)

    raw_password = clean_text(values.get('password'))
    if raw_password:
        changes['password_hash'] = hash_password(raw_password)

    read_id = apply_partial_update(db, User, user_id, changes, duplicate_message=DUPLICATE_ID_MESSAGE)
    return get_user(db, read_id or user_id)


def delete_user(db: Session, user_id: str, *, updated_by: str | None = None) -> bool:
    # Users are never removed; the row stays readable by id.
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(status=UserStatus.DELETED, updated_by=clean_text(updated_by), updated_at=_now())
        .execution_options(synchronize_session=False)
    )
    db.flush()
    logger.info('soft deleted users %s', user_id)
    return True
