from __future__ import annotations


class MasterDataError(ValueError):
    """Base for failures a caller can act on; routers map subclasses to status codes."""

    status_code = 400


class ValidationError(MasterDataError):
    pass


class DuplicateIdError(MasterDataError):
    pass


class DuplicateEmailError(MasterDataError):
    pass


class NotFoundError(MasterDataError):
    status_code = 404
