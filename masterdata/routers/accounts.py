from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from masterdata.db import get_db
from masterdata.dependencies import PageParams
from masterdata.errors import MasterDataError
from masterdata.routers.common import created, dump, http_error, listing, not_found, ok
from masterdata.schemas import AccountCreate, AccountOut, AccountUpdate
from masterdata.services.account_service import (
    create_account,
    delete_account,
    get_account,
    list_accounts,
    update_account,
)
from masterdata.services.master_data import ListFilter

router = APIRouter(prefix='/api/accounts', tags=['accounts'])

NOT_FOUND_MESSAGE = '거래처를 찾을 수 없습니다.'


@router.get('')
def list_accounts_route(
    paging: PageParams = Depends(),
    search: str | None = None,
    business_type: str | None = Query(None, alias='businessType'),
    business_category: str | None = Query(None, alias='businessCategory'),
    db: Session = Depends(get_db),
):
    filters = ListFilter(
        page=paging.page,
        limit=paging.limit,
        search=search,
        exact={'business_type': business_type, 'business_category': business_category},
    )
    rows, total = list_accounts(db, filters=filters)
    return listing(AccountOut, rows, total, filters)


@router.get('/{account_id}')
def get_account_route(account_id: str, db: Session = Depends(get_db)):
    account = get_account(db, account_id)
    if not account:
        raise not_found(NOT_FOUND_MESSAGE)
    return ok(dump(AccountOut, account))


@router.post('')
def create_account_route(payload: AccountCreate, db: Session = Depends(get_db)):
    try:
        account = create_account(
            db,
            values=payload.model_dump(exclude={'created_by'}),
            created_by=payload.created_by,
        )
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(AccountOut, account)
    db.commit()
    return created(body, message='거래처가 성공적으로 생성되었습니다.')


@router.put('/{account_id}')
def update_account_route(account_id: str, payload: AccountUpdate, db: Session = Depends(get_db)):
    if not get_account(db, account_id):
        raise not_found(NOT_FOUND_MESSAGE)
    try:
        account = update_account(db, account_id, values=payload.model_dump(exclude_unset=True))
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(AccountOut, account)
    db.commit()
    return ok(body, message='거래처 정보가 성공적으로 수정되었습니다.')


@router.delete('/{account_id}')
def delete_account_route(account_id: str, db: Session = Depends(get_db)):
    if not get_account(db, account_id):
        raise not_found(NOT_FOUND_MESSAGE)
    delete_account(db, account_id)
    db.commit()
    return ok(message='거래처가 성공적으로 삭제되었습니다.')
