from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from masterdata.client.api_client import MasterDataClient, ResourceClient
from masterdata.client.forms import AccountForm, EntityForm, FieldForm, PurchaseAccountForm, UserForm
from masterdata.client.hotkeys import PageKeyboard, View
from masterdata.client.list_page import ListPage


def _contains(item: dict, name: str, needle: str) -> bool:
    return needle in (item.get(name) or '').lower()


def column_search(*columns: str) -> Callable[[dict, str, str], bool]:
    """Search on the column picked in the search dialog; unknown choices match everything."""

    def matches(item: dict, search_type: str, value: str) -> bool:
        if search_type not in columns:
            return True
        return _contains(item, search_type, value.lower().strip())

    return matches


def field_search(item: dict, search_type: str, value: str) -> bool:
    needle = value.lower().strip()
    if not needle:
        return True
    return any(_contains(item, name, needle) for name in ('id', 'accountId', 'accountName', 'fieldName'))


@dataclass(frozen=True)
class PageSpec:
    resource: str
    label_object: str
    form_class: type[EntityForm]
    search_filter: Callable[[dict, str, str], bool]
    display_name: Callable[[dict], str]
    delete_title: str
    success_messages: dict[str, str]
    fetch_params: dict | None = None
    search_types: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def delete_message(self, item: dict) -> str:
        return f'정말로 "{self.display_name(item)}" {self.label_object} 삭제하시겠습니까?'


USERS = PageSpec(
    resource='users',
    label_object='사용자를',
    form_class=UserForm,
    search_filter=column_search('name', 'department', 'id'),
    display_name=lambda item: item.get('name') or '',
    delete_title='사용자 삭제',
    success_messages={
        'create': '사용자가 추가되었습니다.',
        'update': '사용자 정보가 수정되었습니다.',
        'delete': '사용자가 삭제되었습니다.',
    },
    fetch_params={'status': 'active'},
    search_types=(('name', '사용자명'), ('department', '부서'), ('id', 'ID')),
)

ACCOUNTS = PageSpec(
    resource='accounts',
    label_object='거래처를',
    form_class=AccountForm,
    search_filter=column_search('name', 'representative', 'id'),
    display_name=lambda item: item.get('name') or '',
    delete_title='거래처 삭제',
    success_messages={
        'create': '거래처가 추가되었습니다.',
        'update': '거래처 정보가 수정되었습니다.',
        'delete': '거래처가 삭제되었습니다.',
    },
    search_types=(('name', '거래처명'), ('representative', '대표자'), ('id', 'ID')),
)

PURCHASE_ACCOUNTS = PageSpec(
    resource='purchase-accounts',
    label_object='거래처를',
    form_class=PurchaseAccountForm,
    search_filter=column_search('name', 'representative', 'id'),
    display_name=lambda item: item.get('name') or '',
    delete_title='거래처 삭제',
    success_messages=ACCOUNTS.success_messages,
    search_types=ACCOUNTS.search_types,
)

FIELDS = PageSpec(
    resource='fields',
    label_object='현장을',
    form_class=FieldForm,
    search_filter=field_search,
    display_name=lambda item: item.get('fieldName') or '',
    delete_title='현장 삭제',
    success_messages={
        'create': '현장이 추가되었습니다.',
        'update': '현장 정보가 수정되었습니다.',
        'delete': '현장이 삭제되었습니다.',
    },
)

PAGES = {spec.resource: spec for spec in (USERS, ACCOUNTS, PURCHASE_ACCOUNTS, FIELDS)}


@dataclass
class ManagementPage:
    spec: PageSpec
    list_page: ListPage
    form: EntityForm
    keyboard: PageKeyboard


def build_page(
    spec: PageSpec,
    client: MasterDataClient,
    *,
    confirm: Callable[[str, str], bool],
    notify: Callable[[str, str], None],
    alert: Callable[[str], None] | None = None,
    view: View | None = None,
) -> ManagementPage:
    repository: ResourceClient = {
        'users': client.users,
        'accounts': client.accounts,
        'purchase-accounts': client.purchase_accounts,
        'fields': client.fields,
    }[spec.resource]

    list_page = ListPage(
        repository,
        search_filter=spec.search_filter,
        fetch_params=spec.fetch_params,
        delete_message=spec.delete_message,
        delete_title=lambda item: spec.delete_title,
        success_message=spec.success_messages.__getitem__,
        confirm=confirm,
        notify=notify,
    )
    if spec.form_class is FieldForm:
        form = FieldForm(alert=alert, accounts=client.accounts)
    else:
        form = spec.form_class(alert=alert)
    keyboard = PageKeyboard(
        list_page,
        form,
        view=view,
        checked_message=lambda count: f'선택한 {count}개의 {spec.label_object} 삭제하시겠습니까?',
        checked_title=spec.delete_title,
    )
    list_page.fetch_items()
    return ManagementPage(spec=spec, list_page=list_page, form=form, keyboard=keyboard)
