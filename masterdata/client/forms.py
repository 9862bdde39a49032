from __future__ import annotations

import logging
import re
from typing import Callable

from masterdata.client.api_client import ApiError, ResourceClient
from masterdata.client.keys import Key, KeyOutcome

logger = logging.getLogger(__name__)

SAVE_ERROR_MESSAGE = '저장 중 오류가 발생했습니다.'
REGISTRATION_NUMBER_MESSAGE = '사업자등록번호는 10자리 숫자여야 합니다.'

_NON_DIGIT_RE = re.compile(r'\D')


def _digits(value: str, limit: int) -> str:
    return _NON_DIGIT_RE.sub('', value or '')[:limit]


def format_registration_number(value: str) -> str:
    digits = _digits(value, 10)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 5:
        return f'{digits[:3]}-{digits[3:]}'
    return f'{digits[:3]}-{digits[3:5]}-{digits[5:]}'


def format_phone_number(value: str) -> str:
    """Hyphenate a phone or fax number while it is being typed.

    Seoul numbers (``02``) split 2-4-4, other area codes 3-3-4 and eleven
    digit mobile numbers 3-4-4. Short prefixes of up to six digits split
    after the first two.
    """
    digits = _digits(value, 11)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 6:
        return f'{digits[:2]}-{digits[2:]}'
    if len(digits) <= 10:
        if digits.startswith('02'):
            return f'{digits[:2]}-{digits[2:6]}-{digits[6:]}'
        return f'{digits[:3]}-{digits[3:6]}-{digits[6:]}'
    return f'{digits[:3]}-{digits[3:7]}-{digits[7:]}'


def format_resident_registration_number(value: str) -> str:
    digits = _digits(value, 13)
    if len(digits) <= 6:
        return digits
    return f'{digits[:6]}-{digits[6:]}'


def _ignore_alert(message: str) -> None:
    logger.info('alert: %s', message)


class EntityForm:
    """Inline editor for one record.

    ``record`` is the row being edited, or None while adding. Values are kept
    as strings under the API's camelCase keys. The form only accepts edits
    while ``enabled``; a selected-but-not-editing row is shown read-only.
    """

    fields: tuple[str, ...] = ()
    # inputs that are not free text (selects, radios) and never count as draft content
    choice_fields: frozenset[str] = frozenset()
    defaults: dict[str, str] = {}
    required: dict[str, str] = {}
    formatters: dict[str, Callable[[str], str]] = {}
    registration_field: str | None = None

    def __init__(self, on_save: Callable[[dict], None] | None = None, *, alert: Callable[[str], None] | None = None):
        self.on_save = on_save
        self.alert = alert or _ignore_alert
        self.record: dict | None = None
        self.enabled = False
        self.saving = False
        self.errors: dict[str, str] = {}
        self.values = self.blank_values()

    @property
    def is_add_mode(self) -> bool:
        return self.record is None

    def blank_values(self) -> dict[str, str]:
        return {name: self.defaults.get(name, '') for name in self.fields}

    def load(self, record: dict | None) -> None:
        self.record = record
        if record is None:
            self.values = self.blank_values()
        else:
            self.values = {name: self._stored(record, name) for name in self.fields}
        self.errors = {}

    def _stored(self, record: dict, name: str) -> str:
        value = record.get(name)
        if value is None or value == '':
            return self.defaults.get(name, '')
        return str(value)

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        if not enabled:
            self.saving = False

    def set_value(self, name: str, value: str) -> bool:
        if not self.enabled or name not in self.values:
            return False
        formatter = self.formatters.get(name)
        self.values[name] = formatter(value) if formatter else value
        self.errors.pop(name, None)
        return True

    def validate(self) -> bool:
        errors = {name: message for name, message in self.required.items() if not self.values[name].strip()}
        if self.registration_field:
            number = self.values[self.registration_field]
            if number.strip() and len(_NON_DIGIT_RE.sub('', number)) != 10:
                errors[self.registration_field] = REGISTRATION_NUMBER_MESSAGE
        self.errors = errors
        return not errors

    def is_blank(self) -> bool:
        return all(not self.values[name].strip() for name in self.fields if name not in self.choice_fields)

    def payload(self) -> dict:
        if self.record is None:
            return {
                name: value
                for name, value in self.values.items()
                if value.strip() or name in self.required
            }
        changes = {}
        for name, value in self.values.items():
            if value != self._stored(self.record, name):
                changes[name] = value if value.strip() else None
        return changes

    def submit(self) -> bool:
        if self.saving or self.on_save is None:
            return False
        if not self.validate():
            return False
        self.saving = True
        try:
            self.on_save(self.payload())
        except ApiError as exc:
            logger.warning('save failed: %s', exc)
            self.alert(str(exc) or SAVE_ERROR_MESSAGE)
            return False
        finally:
            self.saving = False
        return True

    def handle_key(self, key: str) -> KeyOutcome:
        if not self.enabled:
            return KeyOutcome.IGNORED
        save_key = Key.F2 if self.is_add_mode else Key.F3
        if key != save_key:
            return KeyOutcome.IGNORED
        if self.is_add_mode and self.is_blank():
            return KeyOutcome.IGNORED
        if not self.saving:
            self.submit()
        return KeyOutcome.CONSUMED


class UserForm(EntityForm):
    fields = ('id', 'name', 'grade', 'department')
    choice_fields = frozenset({'grade'})
    defaults = {'grade': 'general'}
    required = {
        'id': 'ID를 입력해주세요.',
        'name': '사용자명을 입력해주세요.',
        'department': '부서를 입력해주세요.',
    }


class AccountForm(EntityForm):
    fields = (
        'name',
        'printName',
        'registrationNumber',
        'representative',
        'residentRegistrationNumber',
        'phone',
        'fax',
        'address',
        'postalCode',
        'businessType',
        'businessCategory',
        'email',
        'invoice',
        'collectionDate',
        'remarks',
        'contactPerson',
        'closingDate',
        'contactPersonPhone',
    )
    choice_fields = frozenset({'invoice'})
    required = {'name': '거래처명을 입력해주세요.'}
    registration_field = 'registrationNumber'
    formatters = {
        'registrationNumber': format_registration_number,
        'residentRegistrationNumber': format_resident_registration_number,
        'phone': format_phone_number,
        'fax': format_phone_number,
        'contactPersonPhone': format_phone_number,
    }


class PurchaseAccountForm(EntityForm):
    fields = (
        'name',
        'printName',
        'representative',
        'phone',
        'address',
        'registrationNumber',
        'postalCode',
        'fax',
        'businessType',
        'businessCategory',
        'remarks',
        'depositAccount',
        'paymentDate',
        'closingDate',
    )
    required = {'name': '거래처명을 입력해주세요.'}
    registration_field = 'registrationNumber'
    formatters = {
        'registrationNumber': format_registration_number,
        'phone': format_phone_number,
        'fax': format_phone_number,
    }


class FieldForm(EntityForm):
    fields = ('id', 'accountId', 'fieldName')
    choice_fields = frozenset({'accountId'})
    required = {
        'accountId': '거래처를 선택해주세요.',
        'fieldName': '현장명을 입력해주세요.',
    }

    def __init__(self, on_save=None, *, alert=None, accounts: ResourceClient | None = None):
        super().__init__(on_save, alert=alert)
        self.account_options: list[tuple[str, str]] = []
        if accounts is not None:
            self.load_accounts(accounts)

    def load_accounts(self, accounts: ResourceClient) -> None:
        try:
            rows = accounts.list({'limit': 1000})
        except ApiError as exc:
            logger.warning('account options unavailable: %s', exc)
            return
        self.account_options = [(row['id'], row.get('name') or '') for row in rows]
