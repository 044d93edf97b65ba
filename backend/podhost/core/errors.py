"""
Error taxonomy shared by the catalog, the content tree and the HTTP layer.
"""
from typing import Optional


class PodhostError(Exception):
    """Base class for every error raised by podhost"""

    status_code = 500

    def __init__(self, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotFoundError(PodhostError):
    """A catalog lookup by id or alias matched no row"""

    status_code = 404


class InvalidInputError(PodhostError):
    """Caller-supplied data cannot be accepted (bad length, unsafe filename, alias clash)"""

    status_code = 400


class StoreError(PodhostError):
    """The relational engine failed"""


class ContentError(PodhostError):
    """A filesystem operation on the content tree failed"""
