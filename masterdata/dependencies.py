from fastapi import Query

from masterdata.services.master_data import DEFAULT_LIMIT, DEFAULT_PAGE


def _positive_int(raw: str | None, default: int) -> int:
    try:
        value = int((raw or '').strip())
    except ValueError:
        return default
    return value if value > 0 else default


class PageParams:
    def __init__(self, page: str | None = Query(None), limit: str | None = Query(None)) -> None:
        self.page = _positive_int(page, DEFAULT_PAGE)
        self.limit = _positive_int(limit, DEFAULT_LIMIT)
