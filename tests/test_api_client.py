from __future__ import annotations

import io
import json
import unittest
from unittest.mock import patch
from urllib.error import HTTPError, URLError

from masterdata.client.api_client import ApiError, MasterDataClient, ResourceClient


def _respond(urlopen_mock, body: dict) -> None:
    urlopen_mock.return_value.__enter__.return_value.read.return_value = json.dumps(body).encode('utf-8')


def _http_error(code: int, body: bytes) -> HTTPError:
    return HTTPError('http://api.test/api/accounts', code, 'error', {}, io.BytesIO(body))


class ResourceClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = ResourceClient('accounts', base_url='http://api.test/api/', timeout=5)

    @patch('masterdata.client.api_client.urlopen')
    def test_list_sends_query_without_empty_params(self, urlopen_mock) -> None:
        _respond(urlopen_mock, {'success': True, 'data': [{'id': 'A001'}]})

        rows = self.client.list({'page': 1, 'search': None, 'businessType': 'retail'})

        self.assertEqual(rows, [{'id': 'A001'}])
        request = urlopen_mock.call_args.args[0]
        self.assertEqual(request.full_url, 'http://api.test/api/accounts?page=1&businessType=retail')
        self.assertEqual(request.get_method(), 'GET')
        self.assertEqual(urlopen_mock.call_args.kwargs['timeout'], 5)

    @patch('masterdata.client.api_client.urlopen')
    def test_update_puts_json_body_to_quoted_id(self, urlopen_mock) -> None:
        _respond(urlopen_mock, {'success': True, 'data': {'id': 'A 1', 'name': '한빛'}})

        data = self.client.update('A 1', {'name': '한빛'})

        self.assertEqual(data['name'], '한빛')
        request = urlopen_mock.call_args.args[0]
        self.assertEqual(request.full_url, 'http://api.test/api/accounts/A%201')
        self.assertEqual(request.get_method(), 'PUT')
        self.assertEqual(json.loads(request.data.decode('utf-8')), {'name': '한빛'})

    @patch('masterdata.client.api_client.urlopen')
    def test_error_envelope_message_is_raised(self, urlopen_mock) -> None:
        body = json.dumps({'success': False, 'message': '거래처를 찾을 수 없습니다.'}).encode('utf-8')
        urlopen_mock.side_effect = _http_error(404, body)

        with self.assertRaises(ApiError) as ctx:
            self.client.get('A404')

        self.assertEqual(str(ctx.exception), '거래처를 찾을 수 없습니다.')
        self.assertEqual(ctx.exception.status, 404)

    @patch('masterdata.client.api_client.urlopen')
    def test_error_without_envelope_uses_fallback(self, urlopen_mock) -> None:
        urlopen_mock.side_effect = _http_error(502, b'<html>bad gateway</html>')

        with self.assertRaises(ApiError) as ctx:
            self.client.delete('A001')

        self.assertEqual(str(ctx.exception), 'API 요청 실패')
        self.assertEqual(ctx.exception.status, 502)

    @patch('masterdata.client.api_client.urlopen')
    def test_network_failure_is_an_api_error(self, urlopen_mock) -> None:
        urlopen_mock.side_effect = URLError('connection refused')

        with self.assertRaises(ApiError) as ctx:
            self.client.create({'name': '한빛'})

        self.assertIsNone(ctx.exception.status)

    @patch('masterdata.client.api_client.urlopen')
    def test_read_timeout_is_an_api_error(self, urlopen_mock) -> None:
        urlopen_mock.return_value.__enter__.return_value.read.side_effect = TimeoutError('timed out')

        with self.assertRaises(ApiError) as ctx:
            self.client.list()

        self.assertIn('timed out', str(ctx.exception))
        self.assertIsNone(ctx.exception.status)

    @patch('masterdata.client.api_client.urlopen')
    def test_success_without_json_body_uses_fallback(self, urlopen_mock) -> None:
        urlopen_mock.return_value.__enter__.return_value.read.return_value = b'<html>maintenance</html>'

        with self.assertRaises(ApiError) as ctx:
            self.client.get('A001')

        self.assertEqual(str(ctx.exception), 'API 요청 실패')


class MasterDataClientTests(unittest.TestCase):
    def test_resources(self) -> None:
        client = MasterDataClient(base_url='http://api.test/api')

        self.assertEqual(client.purchase_accounts.resource, 'purchase-accounts')
        self.assertEqual(client.fields.base_url, 'http://api.test/api')


if __name__ == '__main__':
    unittest.main()
