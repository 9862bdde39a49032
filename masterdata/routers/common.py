from __future__ import annotations

import math

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from masterdata.errors import MasterDataError, NotFoundError
from masterdata.services.master_data import ListFilter


def dump(schema: type[BaseModel], row) -> dict:
    return schema.model_validate(row).model_dump(by_alias=True, mode='json')


def ok(data=None, *, message: str | None = None) -> dict:
    body: dict = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return body


def created(data, *, message: str) -> JSONResponse:
    return JSONResponse(status_code=201, content=ok(data, message=message))


def listing(schema: type[BaseModel], rows: list, total: int, filters: ListFilter) -> dict:
    body = ok([dump(schema, row) for row in rows])
    body['pagination'] = {
        'page': filters.page,
        'limit': filters.limit,
        'total': total,
        'totalPages': math.ceil(total / filters.limit),
    }
    return body


def http_error(exc: MasterDataError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def not_found(message: str) -> HTTPException:
    return http_error(NotFoundError(message))
