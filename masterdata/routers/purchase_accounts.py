from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from masterdata.db import get_db
from masterdata.dependencies import PageParams
from masterdata.errors import MasterDataError
from masterdata.routers.common import created, dump, http_error, listing, not_found, ok
from masterdata.schemas import PurchaseAccountCreate, PurchaseAccountOut, PurchaseAccountUpdate
from masterdata.services.master_data import ListFilter
from masterdata.services.purchase_account_service import (
    create_purchase_account,
    delete_purchase_account,
    get_purchase_account,
    list_purchase_accounts,
    update_purchase_account,
)

router = APIRouter(prefix='/api/purchase-accounts', tags=['purchase-accounts'])

NOT_FOUND_MESSAGE = '매입거래처를 찾을 수 없습니다.'


@router.get('')
def list_purchase_accounts_route(
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
    rows, total = list_purchase_accounts(db, filters=filters)
    return listing(PurchaseAccountOut, rows, total, filters)


@router.get('/{account_id}')
def get_purchase_account_route(account_id: str, db: Session = Depends(get_db)):
    account = get_purchase_account(db, account_id)
    if not account:
        raise not_found(NOT_FOUND_MESSAGE)
    return ok(dump(PurchaseAccountOut, account))


@router.post('')
def create_purchase_account_route(payload: PurchaseAccountCreate, db: Session = Depends(get_db)):
    try:
        account = create_purchase_account(
            db,
            values=payload.model_dump(exclude={'created_by'}),
            created_by=payload.created_by,
        )
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(PurchaseAccountOut, account)
    db.commit()
    return created(body, message='매입거래처가 성공적으로 생성되었습니다.')


@router.put('/{account_id}')
def update_purchase_account_route(account_id: str, payload: PurchaseAccountUpdate, db: Session = Depends(get_db)):
    if not get_purchase_account(db, account_id):
        raise not_found(NOT_FOUND_MESSAGE)
    try:
        account = update_purchase_account(db, account_id, values=payload.model_dump(exclude_unset=True))
    except MasterDataError as exc:
        raise http_error(exc) from exc
    body = dump(PurchaseAccountOut, account)
    db.commit()
    return ok(body, message='매입거래처 정보가 성공적으로 수정되었습니다.')


@router.delete('/{account_id}')
def delete_purchase_account_route(account_id: str, db: Session = Depends(get_db)):
    if not get_purchase_account(db, account_id):
        raise not_found(NOT_FOUND_MESSAGE)
    delete_purchase_account(db, account_id)
    db.commit()
    return ok(message='매입거래처가 성공적으로 삭제되었습니다.')
