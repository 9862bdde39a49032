from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from masterdata.db import get_db
from masterdata.dependencies import PageParams
from masterdata.errors import MasterDataError
from masterdata.routers.common import created, dump, http_error, listing, not_found, ok
from masterdata.schemas import UserCreate, UserOut, UserUpdate
from masterdata.services.master_data import ListFilter
from masterdata.services.user_service import create_user, delete_user, get_user, list_users, update_user

router = APIRouter(prefix='/api/users', tags=['users'])

NOT_FOUND_MESSAGE = '사용자를 찾을 수 없습니다.'


@router.get('')
def list_users_route(
    paging: PageParams = Depends(),
    search: str | None = None,
    department: str | None = None,
    grade: str | None = None,
    status: str | None = None,
    db: Session = Depends(get_db),
):
    filters = ListFilter(
        page=paging.page,
        limit=paging.limit,
        search=search,
        exact={'department': department, 'grade': grade, 'status': status},
    )
    rows, total = list_users(db, filters=filters)
    return listing(UserOut, rows, total, filters)


@router.get('/{user_id}')
def get_user_route(user_id: str, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    if not user:
        raise not_found(NOT_FOUND_MESSAGE)
    return ok(dump(UserOut, user))


@router.post('')
def create_user_route(payload: UserCreate, db: Session = Depends(get_db)):
    values = payload.model_dump(exclude={'created_by'})
    try:
        user = create_user(db, values=values, created_by=payload.created_by)
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(UserOut, user)
    db.commit()
    return created(body, message='사용자가 성공적으로 생성되었습니다.')


@router.put('/{user_id}')
def update_user_route(user_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    if not get_user(db, user_id):
        raise not_found(NOT_FOUND_MESSAGE)
    try:
        user = update_user(db, user_id, values=payload.model_dump(exclude_unset=True))
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(UserOut, user)
    db.commit()
    return ok(body, message='사용자 정보가 성공적으로 수정되었습니다.')


@router.delete('/{user_id}')
def delete_user_route(
    user_id: str,
    updated_by: str | None = Query(None, alias='updatedBy'),
    db: Session = Depends(get_db),
):
    if not get_user(db, user_id):
        raise not_found(NOT_FOUND_MESSAGE)
    delete_user(db, user_id, updated_by=updated_by)
    db.commit()
    return ok(message='사용자가 성공적으로 삭제되었습니다.')
