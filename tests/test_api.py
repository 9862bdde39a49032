from __future__ import annotations

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from masterdata.config import settings
from masterdata.db import get_db
from masterdata.main import app
from tests.support import make_session_factory


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, session_factory = make_session_factory()

        def override_get_db():
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()


class AccountApiTests(ApiTestCase):
    def test_create_returns_201_with_generated_id_and_camel_case_body(self) -> None:
        response = self.client.post('/api/accounts', json={'name': '한빛건설', 'printName': '한빛', 'created_by': 'admin'})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['data']['id'], 'A001')
        self.assertEqual(body['data']['printName'], '한빛')
        self.assertEqual(body['data']['created_by'], 'admin')
        self.assertIn('created_at', body['data'])

    def test_create_without_name_is_400(self) -> None:
        response = self.client.post('/api/accounts', json={'representative': '김대표'})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_list_returns_pagination_block(self) -> None:
        for n in range(3):
            self.client.post('/api/accounts', json={'name': f'거래처{n}', 'businessType': 'retail'})

        response = self.client.get('/api/accounts', params={'page': 1, 'limit': 2, 'businessType': 'retail'})

        body = response.json()
        self.assertEqual([row['id'] for row in body['data']], ['A003', 'A002'])
        self.assertEqual(body['pagination'], {'page': 1, 'limit': 2, 'total': 3, 'totalPages': 2})

    def test_bad_paging_values_fall_back_to_defaults(self) -> None:
        response = self.client.get('/api/accounts', params={'page': 'x', 'limit': '-5'})

        self.assertEqual(response.json()['pagination']['page'], 1)
        self.assertEqual(response.json()['pagination']['limit'], 100)

    def test_missing_account_is_404(self) -> None:
        response = self.client.get('/api/accounts/A404')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'success': False, 'message': '거래처를 찾을 수 없습니다.'})

    def test_update_is_partial_and_supports_rename(self) -> None:
        self.client.post('/api/accounts', json={'name': '한빛', 'address': '서울'})

        response = self.client.put('/api/accounts/A001', json={'id': 'A050', 'phone': '02-123-4567'})

        self.assertEqual(response.status_code, 200)
        data = response.json()['data']
        self.assertEqual(data['id'], 'A050')
        self.assertEqual(data['address'], '서울')
        self.assertEqual(data['phone'], '02-123-4567')
        self.assertEqual(self.client.get('/api/accounts/A001').status_code, 404)

    def test_update_missing_account_is_404(self) -> None:
        response = self.client.put('/api/accounts/A404', json={'name': 'x'})

        self.assertEqual(response.status_code, 404)

    def test_delete_removes_account(self) -> None:
        self.client.post('/api/accounts', json={'name': '한빛'})

        response = self.client.delete('/api/accounts/A001')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['success'])
        self.assertEqual(self.client.get('/api/accounts/A001').status_code, 404)


class UserApiTests(ApiTestCase):
    def _create(self, user_id: str, **extra):
        payload = {'id': user_id, 'name': '김철수', 'grade': 'general', 'department': '생산부'}
        payload.update(extra)
        return self.client.post('/api/users', json=payload)

    def test_duplicate_user_is_400(self) -> None:
        self.assertEqual(self._create('kim').status_code, 201)

        response = self._create('kim')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], '이미 존재하는 사용자 ID입니다.')

    def test_response_never_exposes_password_hash(self) -> None:
        response = self._create('kim', password='secret')

        self.assertNotIn('passwordHash', response.json()['data'])
        self.assertNotIn('password', response.json()['data'])

    def test_delete_is_soft(self) -> None:
        self._create('kim')
        self._create('lee')

        response = self.client.delete('/api/users/kim', params={'updatedBy': 'admin'})
        self.assertEqual(response.status_code, 200)

        listed = self.client.get('/api/users').json()['data']
        self.assertEqual([row['id'] for row in listed], ['lee'])
        fetched = self.client.get('/api/users/kim').json()['data']
        self.assertEqual(fetched['status'], 'deleted')


class FieldApiTests(ApiTestCase):
    def test_create_field_requires_account(self) -> None:
        response = self.client.post('/api/fields', json={'accountId': 'A001', 'fieldName': '판교'})
        self.assertEqual(response.status_code, 400)

        self.client.post('/api/accounts', json={'name': '한빛'})
        response = self.client.post('/api/fields', json={'accountId': 'A001', 'fieldName': '판교'})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['data']['accountName'], '한빛')


class EnvelopeTests(ApiTestCase):
    def test_health(self) -> None:
        response = self.client.get('/health')

        self.assertEqual(response.json()['status'], 'ok')

    def test_unknown_route_uses_envelope(self) -> None:
        response = self.client.get('/api/nothing-here')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'success': False, 'message': '요청한 리소스를 찾을 수 없습니다.'})

    def test_malformed_body_is_400(self) -> None:
        response = self.client.post(
            '/api/accounts', content=b'{not json', headers={'Content-Type': 'application/json'}
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    @patch('masterdata.routers.accounts.list_accounts')
    def test_unexpected_error_hides_details_outside_development(self, list_accounts_mock) -> None:
        list_accounts_mock.side_effect = RuntimeError('database exploded')
        client = TestClient(app, raise_server_exceptions=False)

        with patch.object(settings, 'app_env', 'production'):
            response = client.get('/api/accounts')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Internal Server Error')

    @patch('masterdata.routers.accounts.list_accounts')
    def test_unexpected_error_shows_details_in_development(self, list_accounts_mock) -> None:
        list_accounts_mock.side_effect = RuntimeError('database exploded')
        client = TestClient(app, raise_server_exceptions=False)

        with patch.object(settings, 'app_env', 'development'):
            response = client.get('/api/accounts')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'database exploded')


if __name__ == '__main__':
    unittest.main()
