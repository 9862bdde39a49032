from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from masterdata.db import get_db
from masterdata.dependencies import PageParams
from masterdata.errors import MasterDataError
from masterdata.routers.common import created, dump, http_error, listing, not_found, ok
from masterdata.schemas import FieldCreate, FieldOut, FieldUpdate
from masterdata.services.field_service import create_field, delete_field, get_field, list_fields, update_field
from masterdata.services.master_data import ListFilter

router = APIRouter(prefix='/api/fields', tags=['fields'])

NOT_FOUND_MESSAGE = '현장을 찾을 수 없습니다.'


@router.get('')
def list_fields_route(
    paging: PageParams = Depends(),
    search: str | None = None,
    account_id: str | None = Query(None, alias='accountId'),
    db: Session = Depends(get_db),
):
    filters = ListFilter(page=paging.page, limit=paging.limit, search=search, exact={'account_id': account_id})
    rows, total = list_fields(db, filters=filters)
    return listing(FieldOut, rows, total, filters)


@router.get('/{field_id}')
def get_field_route(field_id: str, db: Session = Depends(get_db)):
    field = get_field(db, field_id)
    if not field:
        raise not_found(NOT_FOUND_MESSAGE)
    return ok(dump(FieldOut, field))


@router.post('')
def create_field_route(payload: FieldCreate, db: Session = Depends(get_db)):
    try:
        field = create_field(db, values=payload.model_dump(exclude={'created_by'}), created_by=payload.created_by)
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(FieldOut, field)
    db.commit()
    return created(body, message='현장이 성공적으로 생성되었습니다.')


@router.put('/{field_id}')
def update_field_route(field_id: str, payload: FieldUpdate, db: Session = Depends(get_db)):
    if not get_field(db, field_id):
        raise not_found(NOT_FOUND_MESSAGE)
    try:
        field = update_field(db, field_id, values=payload.model_dump(exclude_unset=True))
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(FieldOut, field)
    db.commit()
    return ok(body, message='현장 정보가 성공적으로 수정되었습니다.')


@router.delete('/{field_id}')
def delete_field_route(field_id: str, db: Session = Depends(get_db)):
    if not get_field(db, field_id):
        raise not_found(NOT_FOUND_MESSAGE)
    delete_field(db, field_id)
    db.commit()
    return ok(message='현장이 성공적으로 삭제되었습니다.')
