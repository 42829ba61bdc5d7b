"""
HTTP Transactional Driver

Issues Cypher requests against Neo4j's transactional HTTP endpoint using a
single shared ``httpx.AsyncClient``. Credentials and endpoint come from
``HttpDriverSettings`` (``.env`` / ``OGM_HTTP_*`` environment variables).
"""

import logging
from typing import Any

import httpx

from src.cypher.requests import Statement
from src.driver.config import HttpDriverSettings
from src.driver.response import QueryResult, parse_response, raise_for_errors
from src.driver.transaction import HttpTransaction
from src.shared.exceptions import ResultProcessingError

logger = logging.getLogger("ogm.driver.http")

JSON_CONTENT_TYPE = "application/json;charset=UTF-8"


class HttpDriver:
    """
    Manages one async HTTP client and hands out transactions.

    Usage
    -----
    driver = HttpDriver()            # reads from .env / environment
    await driver.connect()
    tx = await driver.begin_transaction(auto_commit=True)
    result = await tx.run(VariableDepthQuery().find_one(42, 1))
    await driver.close()

    The driver can also be used as an async context-manager:

        async with HttpDriver() as driver:
            async with driver.transaction() as tx:
                await tx.run(...)
    """

    def __init__(
        self,
        settings: HttpDriverSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or HttpDriverSettings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self._settings.neo4j_uri:
            raise ValueError("OGM_HTTP_NEO4J_URI is not set (env or settings)")

    # ─── Lifecycle ──────────────────────────────────────────

    async def connect(self) -> "HttpDriver":
        """Create the underlying HTTP client.

        Returns:
            Self for method chaining.
        """
        if self._client is not None:
            return self

        auth = None
        if self._settings.neo4j_password:
            auth = httpx.BasicAuth(self._settings.neo4j_username, self._settings.neo4j_password)

        self._client = httpx.AsyncClient(
            auth=auth,
            timeout=self._settings.request_timeout,
            transport=self._transport,
            headers={
                "Accept": JSON_CONTENT_TYPE,
                "Content-Type": JSON_CONTENT_TYPE,
                # http://tools.ietf.org/html/rfc7231#section-5.5.3
                "User-Agent": self._settings.user_agent,
            },
        )
        logger.info("HTTP driver ready for %s", self._settings.neo4j_uri)
        return self

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP driver closed")

    async def __aenter__(self) -> "HttpDriver":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ─── Properties ─────────────────────────────────────────

    @property
    def client(self) -> httpx.AsyncClient:
        """Return the raw HTTP client.

        Raises:
            RuntimeError: If the driver is not connected (call connect() first).
        """
        if self._client is None:
            raise RuntimeError("HttpDriver is not connected, call connect() first")
        return self._client

    @property
    def transaction_endpoint(self) -> str:
        """``<server>/db/data/transaction`` with exactly one slash in between."""
        server = self._settings.neo4j_uri
        if not server.endswith("/"):
            server += "/"
        return server + self._settings.transaction_path.strip("/")

    # ─── Transactions ───────────────────────────────────────

    async def begin_transaction(self, auto_commit: bool = False) -> HttpTransaction:
        """Open a transaction.

        Auto-commit transactions post straight to ``<endpoint>/commit`` and need
        no round trip here; explicit ones are created on the server and addressed
        by the ``Location`` header it returns.

        Raises:
            ResultProcessingError: If the server refuses or omits the location.
        """
        if auto_commit:
            return HttpTransaction(self, self.transaction_endpoint + "/commit", auto_commit=True)

        response = await self._send("POST", self.transaction_endpoint, {"statements": []})
        raise_for_errors(_json(response))
        location = response.headers.get("Location")
        if not location:
            raise ResultProcessingError(
                f"Server did not return a transaction location for {self.transaction_endpoint}"
            )
        logger.debug("Opened transaction %s", location)
        return HttpTransaction(self, location)

    def transaction(self, auto_commit: bool = False) -> "_TransactionScope":
        """Async context manager that commits on success and rolls back on error."""
        return _TransactionScope(self, auto_commit)

    async def execute(self, url: str, *requests: Statement) -> list[QueryResult]:
        """Post ``requests`` to the transaction at ``url`` and parse the results.

        Raises:
            ResultProcessingError: On transport failures or HTTP status >= 300.
            CypherExecutionError: If the response reports statement errors.
        """
        payload = {"statements": [request.to_payload() for request in requests]}
        for request in requests:
            logger.debug("POST %s, request: %s", url, request.statement)
        response = await self._send("POST", url, payload)
        return parse_response(_json(response))

    async def commit(self, url: str) -> None:
        response = await self._send("POST", url.rstrip("/") + "/commit", {"statements": []})
        raise_for_errors(_json(response))

    async def rollback(self, url: str) -> None:
        await self._send("DELETE", url)

    # ─── Transport ──────────────────────────────────────────

    async def _send(self, method: str, url: str, json: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self.client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.warning("Caught transport exception: %s", exc)
            raise ResultProcessingError(f"Failed to execute request: {method} {url}") from exc

        logger.debug("Status code: %d", response.status_code)
        if response.status_code >= 300:
            logger.warning("%s %s returned %d", method, url, response.status_code)
            raise ResultProcessingError(
                f"Failed to execute request: {method} {url} "
                f"returned {response.status_code} {response.reason_phrase}"
            )
        return response


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        return response.json()
    except ValueError as exc:
        raise ResultProcessingError(f"Response from {response.request.url} is not valid JSON") from exc


class _TransactionScope:
    """``async with driver.transaction() as tx`` helper."""

    def __init__(self, driver: HttpDriver, auto_commit: bool):
        self._driver = driver
        self._auto_commit = auto_commit
        self._tx: HttpTransaction | None = None

    async def __aenter__(self) -> HttpTransaction:
        self._tx = await self._driver.begin_transaction(self._auto_commit)
        return self._tx

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._tx.__aexit__(exc_type, exc_val, exc_tb)
