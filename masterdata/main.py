import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from masterdata.config import settings
from masterdata.middleware import install_request_logging
from masterdata.routers import accounts, fields, purchase_accounts, users

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    datefmt='%H:%M:%S',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = '요청한 리소스를 찾을 수 없습니다.'
INVALID_REQUEST_MESSAGE = '요청 형식이 올바르지 않습니다.'
SERVER_ERROR_MESSAGE = '서버 오류가 발생했습니다.'

app = FastAPI(title='Master Data Admin')

install_request_logging(app)

app.include_router(users.router)
app.include_router(accounts.router)
app.include_router(purchase_accounts.router)
app.include_router(fields.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_envelope(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404 and message == 'Not Found':
        message = NOT_FOUND_MESSAGE
    return JSONResponse(status_code=exc.status_code, content={'success': False, 'message': message})


@app.exception_handler(RequestValidationError)
async def validation_error_envelope(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={'success': False, 'message': INVALID_REQUEST_MESSAGE, 'error': str(exc.errors())},
    )


@app.exception_handler(Exception)
async def unexpected_error_envelope(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            'success': False,
            'message': SERVER_ERROR_MESSAGE,
            'error': str(exc) if settings.is_development else 'Internal Server Error',
        },
    )


@app.get('/health')
def health() -> dict:
    return {'status': 'ok', 'message': 'Server is running'}
