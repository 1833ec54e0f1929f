# src/lfscheck/client.py
"""Batch API client bound to one LFS endpoint.

Wraps httpx so every check shares a single connection pool for the run.
Server responses are an external boundary: they are validated into
Pydantic models here, and anything that does not fit the batch API
contract becomes an LfsProtocolError that the runner reports as a check
failure.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from json import JSONDecodeError
from types import TracebackType
from typing import Any, Literal

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from lfscheck import __version__
from lfscheck.contracts.errors import LfsProtocolError, LfsTransportError
from lfscheck.endpoint import Endpoint

logger = structlog.get_logger(__name__)

LFS_MEDIA_TYPE = "application/vnd.git-lfs+json"

Operation = Literal["download", "upload"]


# =============================================================================
# Response Models
# =============================================================================


class ObjectAction(BaseModel):
    """A transfer action (download/upload/verify) offered for one object."""

    model_config = {"frozen": True}

    href: str
    header: dict[str, str] | None = None
    expires_in: int | None = None
    expires_at: str | None = None


class ObjectError(BaseModel):
    """Object-level error, e.g. 404 for a missing object on download."""

    model_config = {"frozen": True}

    code: int
    message: str = ""


class BatchObject(BaseModel):
    """One entry of the `objects` array in a batch response."""

    model_config = {"frozen": True}

    oid: str
    size: int | None = None
    authenticated: bool | None = None
    actions: dict[str, ObjectAction] = Field(default_factory=dict)
    error: ObjectError | None = None


class BatchResponse(BaseModel):
    """Parsed body of a successful batch API response."""

    model_config = {"frozen": True}

    transfer: str | None = None
    objects: list[BatchObject]


# =============================================================================
# Client
# =============================================================================


class LfsApiClient:
    """HTTP client for the batch API of a single endpoint.

    Example:
        with LfsApiClient(Endpoint.from_api_url("https://lfs.example/api")) as client:
            response = client.batch("download", client.objects(["abc..."]))
            for obj in response.objects:
                print(obj.oid, obj.error)
    """

    def __init__(
        self,
        endpoint: Endpoint,
        *,
        timeout: float = 30.0,
        object_size: int = 1024,
        user_agent: str = "lfscheck",
    ) -> None:
        self._endpoint = endpoint
        self._object_size = object_size
        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "Accept": LFS_MEDIA_TYPE,
                "Content-Type": LFS_MEDIA_TYPE,
                "User-Agent": f"{user_agent}/{__version__}",
            },
        )

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    def objects(self, oids: Iterable[str], *, size: int | None = None) -> list[dict[str, Any]]:
        """Build the `objects` array of a batch request.

        Every object declares the configured size unless `size` overrides it.
        """
        declared = self._object_size if size is None else size
        return [{"oid": oid, "size": declared} for oid in oids]

    def post_batch(self, payload: Mapping[str, Any]) -> httpx.Response:
        """POST a raw batch payload and return the response, whatever its status.

        Used directly by checks that expect the server to reject a request.

        Raises:
            LfsTransportError: If the request could not be completed.
        """
        url = self._endpoint.batch_url
        try:
            response = self._client.post(url, content=json.dumps(payload))
        except httpx.HTTPError as e:
            logger.debug("batch request failed", url=self._endpoint.sanitized_url, error=str(e))
            raise LfsTransportError(f"POST {self._endpoint.sanitized_url}/objects/batch failed: {e}") from e

        logger.debug(
            "batch request completed",
            url=self._endpoint.sanitized_url,
            operation=payload.get("operation"),
            status_code=response.status_code,
        )
        return response

    def batch(
        self,
        operation: Operation,
        objects: Sequence[Mapping[str, Any]],
        *,
        transfers: Sequence[str] = ("basic",),
    ) -> BatchResponse:
        """Send a batch request and validate the response.

        Raises:
            LfsTransportError: If the request could not be completed.
            LfsProtocolError: If the status is not 200 or the body is not a
                valid batch response.
        """
        payload = {
            "operation": operation,
            "transfers": list(transfers),
            "objects": [dict(o) for o in objects],
        }
        response = self.post_batch(payload)
        if response.status_code != 200:
            raise LfsProtocolError(f"Batch {operation} returned HTTP {response.status_code}: {_body_excerpt(response)}")
        return parse_batch_response(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LfsApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def parse_batch_response(response: httpx.Response) -> BatchResponse:
    """Validate a batch response body.

    Raises:
        LfsProtocolError: If the body is not JSON or does not match the schema.
    """
    try:
        body = response.json()
    except (JSONDecodeError, UnicodeDecodeError) as e:
        raise LfsProtocolError(f"Batch response is not valid JSON: {e}") from e

    try:
        return BatchResponse.model_validate(body)
    except ValidationError as e:
        raise LfsProtocolError(f"Batch response does not match the batch API schema: {e}") from e


def _body_excerpt(response: httpx.Response, limit: int = 200) -> str:
    text = response.text.strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text or "<empty body>"
