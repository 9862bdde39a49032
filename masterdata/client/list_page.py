from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Literal, Protocol, TypeVar

from masterdata.client.api_client import ApiError
from masterdata.client.keys import INPUT_FOCUS, Focus, Key, KeyOutcome

logger = logging.getLogger(__name__)

T = TypeVar('T')

Action = Literal['create', 'update', 'delete']

DEFAULT_DELETE_MESSAGE = '정말로 삭제하시겠습니까?'
DEFAULT_DELETE_TITLE = '삭제 확인'
DEFAULT_SUCCESS_MESSAGES = {
    'create': '추가되었습니다.',
    'update': '수정되었습니다.',
    'delete': '삭제되었습니다.',
}
DELETE_ERROR_MESSAGE = '삭제 중 오류가 발생했습니다.'


class Repository(Protocol[T]):
    def list(self, params: dict | None = None) -> list[T]: ...

    def create(self, data: dict) -> Any: ...

    def update(self, record_id: str, data: dict) -> Any: ...

    def delete(self, record_id: str) -> None: ...


def _item_id(item: Any) -> str:
    return item['id']


def _always_confirm(message: str, title: str) -> bool:
    return True


def _log_notice(level: str, message: str) -> None:
    logger.info('%s: %s', level, message)


class ListPage(Generic[T]):
    """State and handlers behind one master-data list screen.

    The page keeps the last full fetch in ``all_items`` and shows ``items``,
    which is either the same list or a client-side search result. Dialogs are
    reached through ``confirm(message, title)`` and ``notify(level, message)``
    so the controller can be driven without a real UI.
    """

    def __init__(
        self,
        repository: Repository[T],
        *,
        key: Callable[[T], str] = _item_id,
        search_filter: Callable[[T, str, str], bool] | None = None,
        fetch_params: dict | None = None,
        delete_message: Callable[[T], str] | None = None,
        delete_title: Callable[[T], str] | None = None,
        success_message: Callable[[Action], str] | None = None,
        confirm: Callable[[str, str], bool] = _always_confirm,
        notify: Callable[[str, str], None] = _log_notice,
        keyboard_shortcuts: bool = True,
    ) -> None:
        self.repository = repository
        self.key = key
        self.search_filter = search_filter
        self.fetch_params = fetch_params
        self.delete_message = delete_message
        self.delete_title = delete_title
        self.success_message = success_message
        self.confirm = confirm
        self.notify = notify
        self.keyboard_shortcuts = keyboard_shortcuts

        self.all_items: list[T] = []
        self.items: list[T] = []
        self.loading = False
        self.is_form_open = False
        self.is_search_open = False
        self.editing_item: T | None = None
        self.selected_item: T | None = None

    def _message(self, action: Action) -> str:
        if self.success_message:
            return self.success_message(action)
        return DEFAULT_SUCCESS_MESSAGES[action]

    def index_of(self, item: T | None) -> int:
        if item is None:
            return -1
        wanted = self.key(item)
        for index, candidate in enumerate(self.items):
            if self.key(candidate) == wanted:
                return index
        return -1

    def fetch_items(self) -> None:
        self.loading = True
        try:
            fetched = list(self.repository.list(self.fetch_params) or [])
        except (ApiError, OSError) as exc:
            # A failed refresh shows an empty table instead of an alert.
            logger.warning('list fetch failed: %s', exc)
            self.all_items = []
            self.items = []
            return
        finally:
            self.loading = False

        self.all_items = fetched
        self.items = list(fetched)
        if self.selected_item is not None:
            wanted = self.key(self.selected_item)
            self.selected_item = next((item for item in fetched if self.key(item) == wanted), None)

    def handle_add(self) -> None:
        self.editing_item = None
        self.is_form_open = True

    def handle_edit(self, item: T) -> None:
        self.editing_item = item
        self.is_form_open = True

    def handle_cancel(self) -> None:
        self.is_form_open = False
        self.editing_item = None

    def handle_delete(self, item: T) -> bool:
        message = self.delete_message(item) if self.delete_message else DEFAULT_DELETE_MESSAGE
        title = self.delete_title(item) if self.delete_title else DEFAULT_DELETE_TITLE
        if not self.confirm(message, title):
            return False
        try:
            self.repository.delete(str(self.key(item)))
        except ApiError as exc:
            logger.warning('delete failed for %s: %s', self.key(item), exc)
            self.notify('error', str(exc) or DELETE_ERROR_MESSAGE)
            return False
        self.notify('success', self._message('delete'))
        self.selected_item = None
        self.fetch_items()
        return True

    def handle_save(self, data: dict) -> None:
        if self.editing_item is not None:
            self.repository.update(str(self.key(self.editing_item)), data)
            self.notify('success', self._message('update'))
        else:
            self.repository.create(data)
            self.notify('success', self._message('create'))
        self.handle_cancel()
        self.fetch_items()

    def handle_search(self, search_type: str, value: str) -> None:
        if not value.strip() or self.search_filter is None:
            self.items = list(self.all_items)
        else:
            self.items = [item for item in self.all_items if self.search_filter(item, search_type, value)]
        self.selected_item = None

    def handle_row_click(self, item: T) -> None:
        self.selected_item = item

    def open_search(self) -> None:
        self.is_search_open = True

    def close_search(self) -> None:
        self.is_search_open = False

    def step_target(self, step: int) -> T | None:
        """Row the cursor lands on after moving ``step`` rows, clamped to the list."""
        if not self.items:
            return None
        index = self.index_of(self.selected_item)
        if index < 0:
            return self.items[0] if step > 0 else self.items[-1]
        return self.items[min(max(index + step, 0), len(self.items) - 1)]

    def handle_key(self, key: str, focus: Focus = Focus.NONE) -> KeyOutcome:
        if not self.keyboard_shortcuts or self.is_form_open or self.is_search_open:
            return KeyOutcome.IGNORED
        if focus in INPUT_FOCUS or focus is Focus.CHECKBOX:
            return KeyOutcome.IGNORED

        if key == Key.F1:
            self.open_search()
        elif key == Key.F2:
            self.handle_add()
        elif key == Key.F3:
            if self.selected_item is not None:
                self.handle_edit(self.selected_item)
        elif key == Key.F4:
            if self.selected_item is not None:
                self.handle_delete(self.selected_item)
        elif key in (Key.ARROW_UP, Key.ARROW_DOWN):
            target = self.step_target(-1 if key == Key.ARROW_UP else 1)
            if target is not None:
                self.handle_row_click(target)
        else:
            return KeyOutcome.IGNORED
        return KeyOutcome.CONSUMED
