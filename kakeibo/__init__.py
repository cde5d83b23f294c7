"""Core ledger state and derivation package for the household ledger."""

from .models import Category, Transaction
from .services import CategoryService, LedgerService, TransactionService
from .storage import JSONStorage
from .exceptions import RecordNotFoundError, StorageReadError, ValidationError

__all__ = [
    "Category",
    "Transaction",
    "CategoryService",
    "LedgerService",
    "TransactionService",
    "JSONStorage",
    "RecordNotFoundError",
    "StorageReadError",
    "ValidationError",
]
