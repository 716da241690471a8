"""
HTTP client for the DistroPack build service.

Wraps the three service operations (file upload, build trigger and build
status) behind an ``httpx.AsyncClient``. Every request is authenticated with
a bearer token. Requests are attempted once; failures are reported as
``RemoteTransportError`` (no usable response) or ``RemoteRejectedError``
(non-success HTTP status).

Usage:
    async with ApiClient.from_config() as client:
        job_ids = await client.trigger_build("42", "1.2.3")
        status = await client.query_status(job_ids)
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar, Union

import httpx

from ..config import resolve_base_url, resolve_token
from ..models.build import BuildStatusResponse, BuildTriggerResponse
from ..models.config import CliConfig
from ..validation import (
    ErrorSeverity,
    RemoteRejectedError,
    RemoteTransportError,
    SourceFileNotFoundError,
    SourceFileReadError,
    handle_remote_error,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

UPLOAD_PATH = "/api/upload_file"
BUILD_ALL_PATH = "/api/build_package"
BUILD_SINGLE_PATH = "/api/build_package_single"
STATUS_PATH = "/api/build_status"

DEFAULT_TIMEOUT = 60.0


class ApiClient:
    """Async client for the build service API."""

    def __init__(
        self,
        token: str,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            token: Bearer token sent with every request
            base_url: Service root, e.g. https://distropack.dev
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, config: Optional[CliConfig] = None, **kwargs: Any) -> "ApiClient":
        """
        Build a client from the resolved configuration.

        Raises:
            ConfigMissingError: If no API token is configured
        """
        return cls(resolve_token(config), resolve_base_url(config), **kwargs)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _send(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request and reject non-success responses.

        Raises:
            RemoteTransportError: If no response was received
            RemoteRejectedError: If the response status is not 2xx
        """
        logger.debug(f"{operation}: {method} {self.base_url}{path} params={kwargs.get('params')}")
        try:
            response = await self._get_client().request(method, path, **kwargs)
        except httpx.RequestError as e:
            error = RemoteTransportError(f"Failed to send {operation.lower()}: {e}")
            handle_remote_error(error, operation, severity=ErrorSeverity.DEBUG,
                                reraise=False, logger=logger)
            raise error from e

        logger.debug(f"{operation}: HTTP {response.status_code}")
        if not response.is_success:
            raise RemoteRejectedError(operation, response.status_code, response.text)
        return response

    @staticmethod
    def _decode(response: httpx.Response, parser: Callable[[Any], T], operation: str) -> T:
        try:
            return parser(response.json())
        except ValueError as e:
            raise RemoteTransportError(f"Failed to parse {operation.lower()} response: {e}") from e

    async def upload_file(
        self, package_id: str, ref_id: str, file_path: Union[str, Path]
    ) -> None:
        """
        Upload a file to the named slot of a package.

        The file is read fully into memory and sent as a single multipart
        part named ``file``.

        Raises:
            SourceFileNotFoundError: If the path does not exist
            SourceFileReadError: If the file cannot be read
            RemoteTransportError: On connection failure or timeout
            RemoteRejectedError: If the service rejects the upload
        """
        path = Path(file_path)
        if not path.exists():
            raise SourceFileNotFoundError(f"File not found: {file_path}")

        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise SourceFileReadError(f"Failed to read file {file_path}: {e}") from e

        logger.info(f"Uploading {len(content)} bytes from {path.name}")
        await self._send(
            "Upload",
            "POST",
            UPLOAD_PATH,
            params={"packageId": package_id, "accessName": ref_id},
            files={"file": (path.name, content, "application/octet-stream")},
        )

    async def trigger_build(
        self, package_id: str, version: str, target: Optional[str] = None
    ) -> List[str]:
        """
        Trigger a build for one target, or for every enabled target.

        Returns:
            Job ids created by the service, possibly empty

        Raises:
            RemoteTransportError: On connection failure, timeout or an
                unparseable response body
            RemoteRejectedError: If the service rejects the request
        """
        params = {"packageId": package_id}
        if target is not None:
            path = BUILD_SINGLE_PATH
            params["distroType"] = target
        else:
            path = BUILD_ALL_PATH

        # (None, value) makes httpx send a plain multipart form field.
        response = await self._send(
            "Build request",
            "POST",
            path,
            params=params,
            files={"version": (None, version)},
        )
        trigger = self._decode(response, BuildTriggerResponse.from_dict, "Build request")
        logger.info(f"Build request created {len(trigger.job_ids)} job(s)")
        return trigger.job_ids

    async def query_status(self, job_ids: List[str]) -> BuildStatusResponse:
        """
        Fetch the status of a set of jobs in one request.

        Raises:
            ValueError: If ``job_ids`` is empty
            RemoteTransportError: On connection failure, timeout or an
                unparseable response body
            RemoteRejectedError: If the service rejects the request
        """
        if not job_ids:
            raise ValueError("query_status requires at least one job id")

        response = await self._send(
            "Status check",
            "GET",
            STATUS_PATH,
            params={"jobIds": ",".join(job_ids)},
        )
        return self._decode(response, BuildStatusResponse.from_dict, "Status check")
