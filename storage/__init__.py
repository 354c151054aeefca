"""Storage backends."""

from .abstract_storage import AbstractStorage
from .credential_store import CredentialStore, Pagination, UserFilter
from .local_storage import LocalStorage
from .sql_credential_store import SQLCredentialStore

__all__ = [
    "AbstractStorage",
    "CredentialStore",
    "LocalStorage",
    "Pagination",
    "SQLCredentialStore",
    "UserFilter",
]
