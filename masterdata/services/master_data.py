"""Persistence helpers shared by the per-entity service modules.

Each entity module supplies its model, id prefix and column lists; the
functions here own id generation, the list predicate and partial updates.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import Select, and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from masterdata.errors import DuplicateIdError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
ID_DIGITS = 3

_LEADING_DIGITS_RE = re.compile(r'\d+')


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class ListFilter:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str | None = None
    exact: dict[str, object] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def clean_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_id_suffix(record_id: str, prefix: str) -> int:
    """Numeric part after the prefix, like parseInt: leading digits count, anything else is 0."""
    match = _LEADING_DIGITS_RE.match(record_id[len(prefix) :])
    return int(match.group(0)) if match else 0


def next_generated_id(db: Session, model, prefix: str) -> str:
    ids = db.execute(select(model.id).where(model.id.like(f'{prefix}%'))).scalars().all()
    highest = max((parse_id_suffix(record_id, prefix) for record_id in ids), default=0)
    return f'{prefix}{str(highest + 1).zfill(ID_DIGITS)}'


def exists_by_id(db: Session, model, record_id: str) -> bool:
    count = db.execute(select(func.count()).select_from(model).where(model.id == record_id)).scalar_one()
    return count > 0


def search_condition(search: str | None, columns: list) -> object | None:
    term = clean_text(search)
    if not term:
        return None
    # Wildcards in the term are passed through unescaped.
    pattern = f'%{term}%'
    return or_(*(column.ilike(pattern) for column in columns))


def build_conditions(filters: ListFilter, *, search_columns: list, exact_columns: dict) -> list:
    conditions = []
    matched = search_condition(filters.search, search_columns)
    if matched is not None:
        conditions.append(matched)
    for key, value in filters.exact.items():
        if value is None or value == '':
            continue
        conditions.append(exact_columns[key] == value)
    return conditions


def paginate(query: Select, filters: ListFilter, *, order_by: list) -> Select:
    return query.order_by(*order_by).limit(filters.limit).offset(filters.offset)


def count_matching(db: Session, query: Select) -> int:
    return db.execute(select(func.count()).select_from(query.order_by(None).subquery())).scalar_one()


def where_all(query: Select, conditions: list) -> Select:
    if conditions:
        return query.where(and_(*conditions))
    return query


def fetch_by_id(db: Session, model, record_id: str):
    return db.execute(
        select(model).where(model.id == record_id).execution_options(populate_existing=True)
    ).scalar_one_or_none()


def insert_row(db: Session, model, values: dict, *, duplicate_message: str):
    now = _now()
    row = model(**values, created_at=now, updated_at=now)
    db.add(row)
    try:
        db.flush()
    except IntegrityError as exc:
        # Two creators computed the same generated id; the second insert loses.
        db.rollback()
        raise DuplicateIdError(duplicate_message) from exc
    logger.info('created %s %s', model.__tablename__, row.id)
    return row


def apply_partial_update(
    db: Session,
    model,
    record_id: str,
    values: dict,
    *,
    duplicate_message: str,
) -> str | None:
    """Write only the keys present in ``values``; returns the id to read back.

    ``None`` means there was nothing to write and the caller should return the
    current row as-is.
    """
    changes = dict(values)
    new_id = record_id
    if 'id' in changes:
        requested_id = clean_text(changes.pop('id'))
        if requested_id and requested_id != record_id:
            if exists_by_id(db, model, requested_id):
                raise DuplicateIdError(duplicate_message)
            changes['id'] = requested_id
            new_id = requested_id

    if not changes:
        return None

    changes['updated_at'] = _now()
    try:
        db.execute(
            update(model)
            .where(model.id == record_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateIdError(duplicate_message) from exc

    if new_id != record_id:
        logger.info('renamed %s %s -> %s', model.__tablename__, record_id, new_id)
    return new_id


def hard_delete(db: Session, model, record_id: str) -> bool:
    db.execute(delete(model).where(model.id == record_id).execution_options(synchronize_session=False))
    db.flush()
    logger.info('deleted %s %s', model.__tablename__, record_id)
    return True
