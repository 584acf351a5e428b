"""
HTTP client base for the bookstore API.

Builds one ``httpx.Client`` per resource client with the harness defaults
(base URL, JSON headers, timeouts) and returns every exchange as a
``ResponseHandle``. HTTP error statuses are results, not exceptions; only
transport failures raise.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

import httpx

from bookstore.clients.response import ResponseHandle
from bookstore.core.config import ApiSettings
from bookstore.core.errors import TransportError
from bookstore.core.observability import format_json_pretty, sanitize_headers
from bookstore.domain.models import WireModel

logger = logging.getLogger(__name__)
http_logger = logging.getLogger("bookstore.http")

USER_AGENT = "Bookstore-API-Tests/1.0"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": USER_AGENT,
}

# Max characters of a body kept in log lines
MAX_LOGGED_BODY = 2000

ModelT = TypeVar("ModelT", bound=WireModel)


def _truncate(text: str, limit: int = MAX_LOGGED_BODY) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [truncated {len(text) - limit} chars]"


class BaseApiClient:
    """Common request plumbing shared by the resource clients."""

    def __init__(
        self,
        settings: ApiSettings,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings
        self.log_exchanges = settings.test_logging_enabled
        self.client = httpx.Client(
            base_url=settings.api_base_url.rstrip("/"),
            headers=DEFAULT_HEADERS,
            timeout=settings.http_timeout,
            transport=transport,
        )
        logger.info("Initialized %s API client", self.__class__.__name__)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    @property
    def api_path(self) -> str:
        """Versioned API prefix relative to the base URL."""
        return f"/api/{self.settings.api_version}"

    def request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        content: str | bytes | None = None,
    ) -> ResponseHandle:
        """
        Send one request and wrap the result.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json_body: Object serialized as the JSON body
            content: Raw body sent verbatim (used for malformed payloads)

        Raises:
            TransportError: No HTTP response was received
        """
        method = method.upper()
        url = f"{str(self.client.base_url).rstrip('/')}{path}"
        request = self.client.build_request(method, path, json=json_body, content=content)

        if self.log_exchanges:
            http_logger.info(
                "Request: %s %s",
                method,
                url,
                extra={
                    "headers": sanitize_headers(dict(request.headers)),
                    "body": self._body_for_log(json_body, content),
                },
            )

        start_time = time.perf_counter()
        try:
            response = self.client.send(request)
        except httpx.TransportError as exc:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            kind = "timeout" if isinstance(exc, httpx.TimeoutException) else "transport"
            logger.error(
                "Request %s %s failed after %.0fms (%s): %s",
                method,
                url,
                elapsed_ms,
                kind,
                exc,
            )
            raise TransportError(
                f"{method} {url} failed: {exc}",
                method=method,
                url=url,
                details={"kind": kind, "elapsed_ms": round(elapsed_ms, 2)},
            ) from exc

        handle = ResponseHandle(response, (time.perf_counter() - start_time) * 1000)

        if self.log_exchanges:
            http_logger.info(
                "Response: %s %s -> %s (%.0fms)",
                method,
                url,
                handle.status_code,
                handle.elapsed_ms,
                extra={
                    "headers": sanitize_headers(dict(handle.headers)),
                    "body": _truncate(handle.text) if handle.text else None,
                },
            )
        return handle

    @staticmethod
    def _body_for_log(json_body: Any, content: str | bytes | None) -> str | None:
        if json_body is not None:
            return _truncate(format_json_pretty(json_body))
        if content is not None:
            text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
            return _truncate(text)
        return None

    def is_reachable(self) -> bool:
        """GET the Books collection; True only on a 200. Never raises."""
        try:
            response = self.request("GET", f"{self.api_path}/Books")
        except Exception as e:
            logger.error("API is not reachable: %s", e)
            return False

        if response.status_code != 200:
            logger.error("API is not reachable: GET Books returned %s", response.status_code)
            return False
        return True


class ResourceClient(BaseApiClient, Generic[ModelT]):
    """CRUD calls against one collection (``/api/<version>/<collection>``)."""

    collection: ClassVar[str]
    model: ClassVar[type[WireModel]]

    @property
    def collection_path(self) -> str:
        return f"{self.api_path}/{self.collection}"

    def item_path(self, resource_id: int | str) -> str:
        """Path for one item. The id is substituted verbatim, never validated."""
        return f"{self.collection_path}/{resource_id}"

    def _send(self, method: str, path: str, entity: Any = None) -> ResponseHandle:
        if entity is None:
            return self.request(method, path)
        if isinstance(entity, WireModel):
            return self.request(method, path, json_body=entity.to_payload())
        if isinstance(entity, (str, bytes)):
            return self.request(method, path, content=entity)
        if isinstance(entity, Mapping):
            return self.request(method, path, json_body=dict(entity))
        return self.request(method, path, json_body=entity)

    def list_all(self) -> ResponseHandle:
        logger.info("Fetching all %s", self.collection)
        return self._send("GET", self.collection_path)

    def get_by_id(self, resource_id: int | str) -> ResponseHandle:
        logger.info("Fetching %s with ID: %s", self.collection, resource_id)
        return self._send("GET", self.item_path(resource_id))

    def create(self, entity: ModelT | Mapping[str, Any] | str) -> ResponseHandle:
        """POST a new entity. Models lose their ``None`` fields; raw payloads go as-is."""
        logger.info("Creating new %s entry", self.collection)
        return self._send("POST", self.collection_path, entity)

    def update(
        self, resource_id: int | str, entity: ModelT | Mapping[str, Any] | str
    ) -> ResponseHandle:
        logger.info("Updating %s with ID: %s", self.collection, resource_id)
        return self._send("PUT", self.item_path(resource_id), entity)

    def delete(self, resource_id: int | str) -> ResponseHandle:
        logger.info("Deleting %s with ID: %s", self.collection, resource_id)
        return self._send("DELETE", self.item_path(resource_id))

    def _as_models(self, response: ResponseHandle) -> list[ModelT]:
        """Parse a 200 array body; anything else yields an empty list."""
        if response.status_code != 200:
            return []
        data = response.json_or_none()
        if not isinstance(data, list):
            return []
        return [self.model.from_payload(item) for item in data if isinstance(item, dict)]

    def _as_model(self, response: ResponseHandle) -> ModelT | None:
        """Parse a 200 object body; anything else yields None."""
        if response.status_code != 200:
            return None
        data = response.json_or_none()
        if not isinstance(data, dict):
            return None
        return self.model.from_payload(data)

    def list_all_as_models(self) -> list[ModelT]:
        return self._as_models(self.list_all())

    def get_by_id_as_model(self, resource_id: int | str) -> ModelT | None:
        return self._as_model(self.get_by_id(resource_id))

    def exists(self, resource_id: int | str) -> bool:
        return self.get_by_id(resource_id).status_code == 200

    def parse(self, response: ResponseHandle) -> ModelT | None:
        """Deserialize a single-entity response (None unless 200)."""
        return self._as_model(response)

    def parse_list(self, response: ResponseHandle) -> list[ModelT]:
        """Deserialize a collection response (empty unless 200)."""
        return self._as_models(response)
