from __future__ import annotations

import logging
from typing import Callable

from masterdata.client.api_client import ApiError
from masterdata.client.forms import EntityForm
from masterdata.client.keys import ARROW_KEYS, FUNCTION_KEYS, Focus, Key, KeyOutcome
from masterdata.client.list_page import DELETE_ERROR_MESSAGE, ListPage

logger = logging.getLogger(__name__)


class View:
    """UI side effects the keyboard layer asks for. The default does nothing."""

    def blur_active(self) -> None:
        pass

    def blur_form_inputs(self) -> None:
        pass

    def focus_table(self) -> None:
        pass

    def focus_first_input(self) -> None:
        pass

    def defer(self, callback: Callable[[], None]) -> None:
        callback()


def _checked_message(count: int) -> str:
    return f'선택한 {count}개의 항목을 삭제하시겠습니까?'


class PageKeyboard:
    """Function-key and arrow handling for a list page with an inline form.

    Keys reach this layer before the form. ``press`` returns what happened;
    only a ``PROPAGATE`` result is handed on to ``form.handle_key``. Rules are
    checked in order: search dialog, F1, F2, F3, F4, arrows, then plain typing.
    """

    def __init__(
        self,
        page: ListPage,
        form: EntityForm,
        *,
        view: View | None = None,
        checked_message: Callable[[int], str] = _checked_message,
        checked_title: str | None = None,
    ) -> None:
        self.page = page
        self.form = form
        self.view = view or View()
        self.checked_message = checked_message
        self.checked_title = checked_title
        self.edit_mode = False
        self.checked: set[str] = set()

        page.keyboard_shortcuts = False
        form.on_save = self.save

    @property
    def in_add_mode(self) -> bool:
        return self.edit_mode and self.page.editing_item is None

    def _set_edit_mode(self, enabled: bool) -> None:
        self.edit_mode = enabled
        self.form.set_enabled(enabled)

    def press(self, key: str, focus: Focus = Focus.NONE) -> KeyOutcome:
        outcome = self.handle_key(key, focus)
        if outcome is KeyOutcome.PROPAGATE:
            return self.form.handle_key(key)
        return outcome

    def handle_key(self, key: str, focus: Focus = Focus.NONE) -> KeyOutcome:
        if key not in FUNCTION_KEYS and key not in ARROW_KEYS:
            return KeyOutcome.IGNORED
        if key in ARROW_KEYS and self.edit_mode:
            return KeyOutcome.IGNORED

        if key == Key.F1:
            # swallowed even when the dialog is already open
            if not self.page.is_search_open:
                if focus in (Focus.TEXT_INPUT, Focus.TEXTAREA):
                    self.view.blur_active()
                self.page.open_search()
            return KeyOutcome.CONSUMED

        if self.page.is_search_open:
            return KeyOutcome.IGNORED

        if key == Key.F2:
            return self._on_add_key()
        if key == Key.F3:
            return self._on_edit_key()
        if key == Key.F4:
            self.view.blur_active()
            self.view.defer(self.delete_selection)
            return KeyOutcome.CONSUMED

        self.view.blur_form_inputs()
        target = self.page.step_target(-1 if key == Key.ARROW_UP else 1)
        if target is not None:
            self.row_click(target)
        return KeyOutcome.CONSUMED

    def _on_add_key(self) -> KeyOutcome:
        if self.in_add_mode:
            if not self.form.is_blank():
                return KeyOutcome.PROPAGATE
            self.cancel_add()
            return KeyOutcome.CONSUMED
        self.page.handle_add()
        self.form.load(None)
        self._set_edit_mode(True)
        self.view.defer(self.view.focus_first_input)
        return KeyOutcome.CONSUMED

    def _on_edit_key(self) -> KeyOutcome:
        selected = self.page.selected_item
        if selected is None:
            return KeyOutcome.IGNORED
        if self.edit_mode:
            return KeyOutcome.PROPAGATE
        self.page.handle_edit(selected)
        self.form.load(selected)
        self._set_edit_mode(True)
        return KeyOutcome.CONSUMED

    def cancel_add(self) -> None:
        self._set_edit_mode(False)
        self.page.handle_cancel()
        self.form.load(self.page.selected_item)
        self.view.blur_form_inputs()
        self.view.defer(self.view.focus_table)

    def row_click(self, item) -> None:
        if self.edit_mode and not self.form.saving:
            previous = self.page.selected_item
            if previous is None or self.page.key(previous) != self.page.key(item):
                self._set_edit_mode(False)
                self.page.handle_cancel()
        self.page.handle_row_click(item)
        if not self.edit_mode:
            self.form.load(item)

    def toggle_checked(self, record_id: str, checked: bool | None = None) -> None:
        if checked is None:
            checked = record_id not in self.checked
        if checked:
            self.checked.add(record_id)
        else:
            self.checked.discard(record_id)

    def delete_selection(self) -> None:
        if self.checked:
            self.delete_checked()
        elif self.page.selected_item is not None:
            self.page.handle_delete(self.page.selected_item)

    def delete_checked(self) -> bool:
        if not self.checked:
            return False
        count = len(self.checked)
        title = self.checked_title or '삭제 확인'
        if not self.page.confirm(self.checked_message(count), title):
            return False
        try:
            for record_id in sorted(self.checked):
                self.page.repository.delete(record_id)
                self.checked.discard(record_id)
        except ApiError as exc:
            logger.warning('bulk delete stopped: %s', exc)
            self.page.notify('error', str(exc) or DELETE_ERROR_MESSAGE)
            self.page.fetch_items()
            return False
        self.checked.clear()
        self.page.fetch_items()
        return True

    def save(self, data: dict) -> None:
        self.page.handle_save(data)
        self._set_edit_mode(False)
        self.page.handle_cancel()
        self.form.load(self.page.selected_item)
        self.view.defer(self.view.focus_table)
