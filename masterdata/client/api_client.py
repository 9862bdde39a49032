from __future__ import annotations

import json
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from masterdata.config import settings

FALLBACK_MESSAGE = 'API 요청 실패'


class ApiError(RuntimeError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def _error_message(body: dict | None) -> str:
    if not body:
        return FALLBACK_MESSAGE
    return body.get('message') or body.get('error') or FALLBACK_MESSAGE


class ResourceClient:
    """list/get/create/update/delete over one ``/api/<resource>`` collection."""

    def __init__(self, resource: str, *, base_url: str | None = None, timeout: int | None = None) -> None:
        self.resource = resource.strip('/')
        self.base_url = (base_url or settings.api_base_url).rstrip('/')
        self.timeout = timeout or settings.api_timeout_seconds

    def _url(self, record_id: str | None = None, params: dict | None = None) -> str:
        url = f'{self.base_url}/{self.resource}'
        if record_id is not None:
            url += '/' + quote(str(record_id), safe='')
        query = {key: value for key, value in (params or {}).items() if value is not None}
        if query:
            url += '?' + urlencode(query)
        return url

    def _send(self, method: str, url: str, payload: dict | None = None) -> dict:
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        req = Request(url=url, data=data, headers={'Content-Type': 'application/json'}, method=method)
        try:
            with urlopen(req, timeout=self.timeout) as response:
                return json.loads(response.read().decode('utf-8') or '{}')
        except HTTPError as exc:
            raw = exc.read().decode('utf-8', errors='ignore') if exc.fp else ''
            try:
                body = json.loads(raw) if raw else None
            except json.JSONDecodeError:
                body = None
            raise ApiError(_error_message(body), exc.code) from exc
        except URLError as exc:
            raise ApiError(f'API 네트워크 오류: {exc.reason}') from exc
        except OSError as exc:
            # timeouts while reading the body are not wrapped in URLError
            raise ApiError(f'API 네트워크 오류: {exc}') from exc
        except ValueError as exc:
            raise ApiError(FALLBACK_MESSAGE) from exc

    def list_page(self, params: dict | None = None) -> dict:
        return self._send('GET', self._url(params=params))

    def list(self, params: dict | None = None) -> list[dict]:
        return self.list_page(params).get('data') or []

    def get(self, record_id: str) -> dict:
        return self._send('GET', self._url(record_id)).get('data')

    def create(self, data: dict) -> dict:
        return self._send('POST', self._url(), data).get('data')

    def update(self, record_id: str, data: dict) -> dict:
        return self._send('PUT', self._url(record_id), data).get('data')

    def delete(self, record_id: str) -> None:
        self._send('DELETE', self._url(record_id))


class MasterDataClient:
    def __init__(self, *, base_url: str | None = None, timeout: int | None = None) -> None:
        self.users = ResourceClient('users', base_url=base_url, timeout=timeout)
        self.accounts = ResourceClient('accounts', base_url=base_url, timeout=timeout)
        self.purchase_accounts = ResourceClient('purchase-accounts', base_url=base_url, timeout=timeout)
        self.fields = ResourceClient('fields', base_url=base_url, timeout=timeout)
