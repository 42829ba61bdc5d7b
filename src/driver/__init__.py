"""
Driver package: transactional HTTP transport for built requests.
"""

from .http_driver import HttpDriver
from .transaction import HttpTransaction, TransactionStatus

__all__ = ["HttpDriver", "HttpTransaction", "TransactionStatus"]
