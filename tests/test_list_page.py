from __future__ import annotations

import unittest
from unittest.mock import Mock

from masterdata.client.api_client import ApiError
from masterdata.client.keys import Focus, Key, KeyOutcome
from masterdata.client.list_page import ListPage

ROWS = [{'id': 'A001', 'name': '한빛'}, {'id': 'A002', 'name': '대성'}, {'id': 'A003', 'name': '한울'}]


def _name_search(item: dict, search_type: str, value: str) -> bool:
    return value.lower() in item['name'].lower()


class ListPageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = Mock()
        self.repository.list.return_value = [dict(row) for row in ROWS]
        self.confirm = Mock(return_value=True)
        self.notify = Mock()
        self.page = ListPage(
            self.repository,
            search_filter=_name_search,
            fetch_params={'status': 'active'},
            confirm=self.confirm,
            notify=self.notify,
        )
        self.page.fetch_items()

    def test_fetch_loads_items_with_fixed_params(self) -> None:
        self.repository.list.assert_called_with({'status': 'active'})
        self.assertEqual([row['id'] for row in self.page.items], ['A001', 'A002', 'A003'])
        self.assertEqual(self.page.all_items, self.page.items)
        self.assertFalse(self.page.loading)

    def test_fetch_reresolves_selection_by_key(self) -> None:
        self.page.handle_row_click(self.page.items[1])
        self.repository.list.return_value = [{'id': 'A002', 'name': '대성산업'}]

        self.page.fetch_items()

        self.assertEqual(self.page.selected_item, {'id': 'A002', 'name': '대성산업'})

        self.repository.list.return_value = [{'id': 'A001', 'name': '한빛'}]
        self.page.fetch_items()
        self.assertIsNone(self.page.selected_item)

    def test_fetch_failure_degrades_to_empty_list_without_alert(self) -> None:
        self.repository.list.side_effect = ApiError('API 요청 실패', 500)

        self.page.fetch_items()

        self.assertEqual(self.page.items, [])
        self.assertEqual(self.page.all_items, [])
        self.assertFalse(self.page.loading)
        self.notify.assert_not_called()

    def test_fetch_timeout_clears_stale_rows(self) -> None:
        self.repository.list.side_effect = TimeoutError('timed out')

        self.page.fetch_items()

        self.assertEqual(self.page.items, [])
        self.assertEqual(self.page.all_items, [])
        self.assertFalse(self.page.loading)

    def test_add_and_edit_open_the_form(self) -> None:
        selected = self.page.items[0]
        self.page.handle_row_click(selected)

        self.page.handle_add()
        self.assertTrue(self.page.is_form_open)
        self.assertIsNone(self.page.editing_item)
        self.assertIs(self.page.selected_item, selected)

        self.page.handle_edit(selected)
        self.assertIs(self.page.editing_item, selected)

        self.page.handle_cancel()
        self.assertFalse(self.page.is_form_open)
        self.assertIsNone(self.page.editing_item)

    def test_delete_rejected_by_confirm_has_no_effect(self) -> None:
        self.confirm.return_value = False

        self.assertFalse(self.page.handle_delete(self.page.items[0]))

        self.confirm.assert_called_once_with('정말로 삭제하시겠습니까?', '삭제 확인')
        self.repository.delete.assert_not_called()

    def test_delete_confirmed_removes_and_refetches(self) -> None:
        self.page.handle_row_click(self.page.items[0])
        self.repository.list.reset_mock()

        self.assertTrue(self.page.handle_delete(self.page.items[0]))

        self.repository.delete.assert_called_once_with('A001')
        self.notify.assert_called_once_with('success', '삭제되었습니다.')
        self.assertIsNone(self.page.selected_item)
        self.repository.list.assert_called_once()

    def test_delete_error_is_notified(self) -> None:
        self.repository.delete.side_effect = ApiError('거래처를 찾을 수 없습니다.', 404)

        self.page.handle_delete(self.page.items[0])

        self.notify.assert_called_once_with('error', '거래처를 찾을 수 없습니다.')

        self.notify.reset_mock()
        self.repository.delete.side_effect = ApiError('')
        self.page.handle_delete(self.page.items[0])
        self.notify.assert_called_once_with('error', '삭제 중 오류가 발생했습니다.')

    def test_save_creates_or_updates_by_editing_item(self) -> None:
        self.page.handle_add()
        self.page.handle_save({'name': '신규'})
        self.repository.create.assert_called_once_with({'name': '신규'})
        self.notify.assert_called_with('success', '추가되었습니다.')
        self.assertFalse(self.page.is_form_open)

        self.page.handle_edit(self.page.items[1])
        self.page.handle_save({'name': '변경'})
        self.repository.update.assert_called_once_with('A002', {'name': '변경'})
        self.notify.assert_called_with('success', '수정되었습니다.')
        self.assertIsNone(self.page.editing_item)

    def test_save_error_propagates_and_keeps_form_open(self) -> None:
        self.repository.create.side_effect = ApiError('필수 필드(name)가 누락되었습니다.', 400)
        self.page.handle_add()

        with self.assertRaises(ApiError):
            self.page.handle_save({})

        self.assertTrue(self.page.is_form_open)

    def test_custom_messages(self) -> None:
        page = ListPage(
            self.repository,
            delete_message=lambda item: f'"{item["name"]}" 삭제?',
            delete_title=lambda item: '거래처 삭제',
            success_message=lambda action: f'{action} 완료',
            confirm=self.confirm,
            notify=self.notify,
        )

        page.handle_delete(ROWS[0])

        self.confirm.assert_called_once_with('"한빛" 삭제?', '거래처 삭제')
        self.notify.assert_called_once_with('success', 'delete 완료')

    def test_search_filters_and_blank_search_resets(self) -> None:
        self.page.handle_row_click(self.page.items[0])

        self.page.handle_search('name', '한')
        self.assertEqual([row['id'] for row in self.page.items], ['A001', 'A003'])
        self.assertIsNone(self.page.selected_item)

        self.page.handle_search('name', '   ')
        self.assertEqual(len(self.page.items), 3)

    def test_builtin_keys(self) -> None:
        self.assertEqual(self.page.handle_key(Key.ARROW_DOWN), KeyOutcome.CONSUMED)
        self.assertEqual(self.page.selected_item['id'], 'A001')

        self.page.handle_key(Key.ARROW_UP)
        self.assertEqual(self.page.selected_item['id'], 'A001')

        self.page.handle_key(Key.F3)
        self.assertTrue(self.page.is_form_open)
        self.assertEqual(self.page.handle_key(Key.F1), KeyOutcome.IGNORED)

    def test_arrow_up_without_selection_picks_last_row(self) -> None:
        self.page.handle_key(Key.ARROW_UP)
        self.assertEqual(self.page.selected_item['id'], 'A003')

        self.page.handle_key(Key.ARROW_DOWN)
        self.assertEqual(self.page.selected_item['id'], 'A003')

    def test_builtin_keys_suppressed_in_inputs_and_when_disabled(self) -> None:
        self.assertEqual(self.page.handle_key(Key.F1, Focus.TEXT_INPUT), KeyOutcome.IGNORED)
        self.assertFalse(self.page.is_search_open)

        self.page.handle_key(Key.F1)
        self.assertTrue(self.page.is_search_open)
        self.page.close_search()

        self.page.keyboard_shortcuts = False
        self.assertEqual(self.page.handle_key(Key.F2), KeyOutcome.IGNORED)
        self.assertFalse(self.page.is_form_open)

    def test_f4_deletes_selected_row(self) -> None:
        self.page.handle_key(Key.F4)
        self.repository.delete.assert_not_called()

        self.page.handle_row_click(self.page.items[2])
        self.page.handle_key(Key.F4)
        self.repository.delete.assert_called_once_with('A003')


if __name__ == '__main__':
    unittest.main()
