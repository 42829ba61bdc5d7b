"""
HTTP transaction handle.

A transaction is identified by its URL on the server: either an explicit
transaction created via ``POST /db/data/transaction`` (the ``Location``
header), or the auto-commit endpoint ``/db/data/transaction/commit`` which
commits every request it receives.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING

from src.cypher.requests import Statement
from src.driver.response import QueryResult
from src.shared.exceptions import CypherExecutionError, TransactionError
from src.shared.logging import generate_correlation_id, transaction_logger

if TYPE_CHECKING:
    from src.driver.http_driver import HttpDriver

logger = logging.getLogger("ogm.driver.transaction")


class TransactionStatus(str, Enum):
    OPEN = "OPEN"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


class HttpTransaction:
    """One open transaction on the transactional endpoint.

    Usage::

        tx = await driver.begin_transaction()
        result = await tx.run(request)
        await tx.commit()

    or, committing on success and rolling back on error::

        async with await driver.begin_transaction() as tx:
            await tx.run(request)
    """

    def __init__(self, driver: "HttpDriver", url: str, auto_commit: bool = False):
        self._driver = driver
        self._url = url
        self._auto_commit = auto_commit
        self._status = TransactionStatus.OPEN
        self.correlation_id = generate_correlation_id()
        self._log = transaction_logger(logger, self.correlation_id)

    @property
    def url(self) -> str:
        return self._url

    @property
    def auto_commit(self) -> bool:
        return self._auto_commit

    @property
    def status(self) -> TransactionStatus:
        return self._status

    def _ensure_open(self, action: str) -> None:
        if self._status != TransactionStatus.OPEN:
            raise TransactionError(
                f"Cannot {action}: transaction {self.correlation_id} is {self._status.value}"
            )

    # ─── Statements ─────────────────────────────────────────

    async def run(self, request: Statement) -> QueryResult:
        """Run a single request and return its result.

        A body with no results (e.g. a write with nothing to return) yields an
        empty ``QueryResult``.
        """
        results = await self.run_many(request)
        if not results:
            return QueryResult(columns=[])
        return results[0]

    async def run_many(self, *requests: Statement) -> list[QueryResult]:
        """Run several requests in one round trip, results in request order.

        Raises:
            TransactionError: If the transaction is no longer open.
            CypherExecutionError: If the server reports statement errors; the
                server rolls the transaction back in that case.
            ResultProcessingError: If the request fails at the HTTP level.
        """
        self._ensure_open("run statements")
        self._log.debug("POST %s (%d statement(s))", self._url, len(requests))
        try:
            results = await self._driver.execute(self._url, *requests)
        except CypherExecutionError:
            self._status = TransactionStatus.ROLLED_BACK
            raise
        if self._auto_commit:
            self._status = TransactionStatus.COMMITTED
        return results

    # ─── Lifecycle ──────────────────────────────────────────

    async def commit(self) -> None:
        self._ensure_open("commit")
        if not self._auto_commit:
            await self._driver.commit(self._url)
        self._status = TransactionStatus.COMMITTED
        self._log.debug("committed")

    async def rollback(self) -> None:
        self._ensure_open("roll back")
        if not self._auto_commit:
            await self._driver.rollback(self._url)
        self._status = TransactionStatus.ROLLED_BACK
        self._log.debug("rolled back")

    async def __aenter__(self) -> "HttpTransaction":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._status != TransactionStatus.OPEN:
            return
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()
