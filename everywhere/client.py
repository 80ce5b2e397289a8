# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
HTTP client for the Everywhere sandbox API.

Each public method issues exactly one request against ``base_url`` and
either returns a typed payload from ``everywhere.models`` or raises one of
the errors in ``everywhere.errors``:

- RemoteError: status outside the operation's success set; the raw body
  is kept verbatim
- ExecutionError: exec/run succeeded over HTTP but reported an ``error``
- TransportError: connection failure or timeout

No retries are performed.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

import requests

from .errors import (
    AuthenticationError,
    ExecutionError,
    FilesystemError,
    RemoteError,
    ResponseDecodeError,
    TransportError,
)
from .models import (
    AuthStatus,
    DaciteError,
    ExecutionResult,
    RemoteFile,
    Sandbox,
    SandboxList,
    decode,
    decode_list,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DOWNLOAD_NAME = "download.zip"
DOWNLOAD_CHUNK_SIZE = 8192

SUCCESS = (200,)
CREATED = (200, 201)


def parse_content_disposition(header: Optional[str]) -> str:
    """Extract the ``filename="..."`` value from a Content-Disposition header."""
    if not header:
        return DEFAULT_DOWNLOAD_NAME
    marker = 'filename="'
    idx = header.find(marker)
    if idx == -1:
        return DEFAULT_DOWNLOAD_NAME
    start = idx + len(marker)
    end = header.find('"', start)
    if end == -1:
        return DEFAULT_DOWNLOAD_NAME
    return header[start:end]


@dataclass
class ArchiveDownload:
    """Streamed zip download; the caller drains and closes it."""

    filename: str
    response: requests.Response

    def iter_chunks(self, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> Iterator[bytes]:
        try:
            for chunk in self.response.iter_content(chunk_size=chunk_size):
                if chunk:
                    yield chunk
        except requests.exceptions.RequestException as e:
            raise TransportError(f"download interrupted: {e}", e) from e

    def close(self) -> None:
        self.response.close()

    def __enter__(self) -> "ArchiveDownload":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EverywhereClient:
    """Authenticated client for the sandbox management API.

    The client holds no state besides the endpoint, the token and the
    HTTP session, so it is cheap to build one per command.

    Example:
        client = EverywhereClient("https://api.everywhere.dev/api/v1", token)
        for sandbox in client.list_sandboxes().items:
            print(sandbox.name, sandbox.status)
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        base_url: str,
        auth_token: str = "",
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, json_body: bool = True) -> Dict[str, str]:
        headers = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, str]] = None,
        stream: bool = False,
    ) -> requests.Response:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(json_body=files is None),
                json=json_body,
                params=params,
                files=files,
                data=data,
                timeout=self.timeout,
                stream=stream,
            )
        except requests.exceptions.Timeout as e:
            logger.debug("%s %s timed out", method, endpoint)
            raise TransportError(f"request timeout: {method} {endpoint}", e) from e
        except requests.exceptions.RequestException as e:
            logger.debug("%s %s failed: %s", method, endpoint, e)
            raise TransportError(
                f"failed to connect to server {self.base_url}: {e}", e
            ) from e

        logger.debug("%s %s -> HTTP %s", method, endpoint, response.status_code)
        return response

    @staticmethod
    def _check(
        response: requests.Response, action: str, ok: Tuple[int, ...] = SUCCESS
    ) -> None:
        if response.status_code not in ok:
            body = response.text
            response.close()
            raise RemoteError(action, response.status_code, body)

    @staticmethod
    def _json(response: requests.Response, action: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"{action}: invalid JSON response", response.status_code, response.text
            ) from e

    def _envelope_data(self, response: requests.Response, action: str) -> Any:
        payload = self._json(response, action)
        if not isinstance(payload, dict):
            raise ResponseDecodeError(
                f"{action}: unexpected response", response.status_code, response.text
            )
        if payload.get("msg"):
            logger.debug("%s: %s", action, payload["msg"])
        return payload.get("data")

    def _decode(
        self, response: requests.Response, action: str, data_class: Type[T]
    ) -> T:
        data = self._envelope_data(response, action)
        try:
            return decode(data_class, data)
        except (DaciteError, TypeError) as e:
            raise ResponseDecodeError(
                f"{action}: {e}", response.status_code, response.text
            ) from e

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def get_auth_status(self) -> AuthStatus:
        """Check whether the configured token is accepted by the server."""
        response = self._request("GET", "/auth/status")
        if response.status_code == 401:
            raise AuthenticationError(f"authentication failed: {response.text}")
        self._check(response, "failed to get auth status")

        payload = self._json(response, "failed to get auth status")
        try:
            return decode(AuthStatus, payload)
        except (DaciteError, TypeError) as e:
            raise ResponseDecodeError(
                f"failed to get auth status: {e}", response.status_code, response.text
            ) from e

    # ------------------------------------------------------------------
    # Sandboxes
    # ------------------------------------------------------------------

    def list_sandboxes(self) -> SandboxList:
        action = "failed to list sandboxes"
        response = self._request("GET", "/sandbox")
        self._check(response, action)
        return self._decode(response, action, SandboxList)

    def create_sandbox(
        self,
        name: str = "",
        port: str = "",
        secrets: Optional[Dict[str, str]] = None,
    ) -> Sandbox:
        """Create a sandbox; empty arguments are left for the server to fill."""
        body: Dict[str, Any] = {}
        if name:
            body["name"] = name
        if port:
            body["port"] = port
        if secrets:
            body["secrets"] = secrets

        action = "failed to create sandbox"
        response = self._request("POST", "/sandbox", json_body=body)
        self._check(response, action, ok=CREATED)
        return self._decode(response, action, Sandbox)

    def delete_sandbox(self, name: str) -> None:
        response = self._request("DELETE", f"/sandbox/{name}")
        self._check(response, "failed to delete sandbox")

    def start_sandbox(self, name: str) -> None:
        response = self._request("PUT", f"/sandbox/{name}/start")
        self._check(response, "failed to start sandbox")

    def stop_sandbox(self, name: str) -> None:
        response = self._request("PUT", f"/sandbox/{name}/stop")
        self._check(response, "failed to stop sandbox")

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _execute(
        self, endpoint: str, body: Dict[str, str], action: str, failure: str
    ) -> str:
        response = self._request("POST", endpoint, json_body=body)
        self._check(response, action)
        result = self._decode(response, action, ExecutionResult)
        if result.error:
            raise ExecutionError(f"{failure}: {result.error}", error=result.error)
        return result.output

    def run_command(self, sandbox: str, command: str) -> str:
        """Run a shell command and return its output."""
        body = {"command": command}
        if sandbox:
            body["id"] = sandbox
        return self._execute(
            "/sandbox/exec", body, "failed to run command", "command failed"
        )

    def run_python(self, sandbox: str, code: str, entrypoint: str = "") -> str:
        """Run Python source and return its output."""
        body = {"code": code}
        if sandbox:
            body["id"] = sandbox
        if entrypoint:
            body["entrypoint"] = entrypoint
        return self._execute(
            "/sandbox/run", body, "failed to run python", "python execution failed"
        )

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def download_zip(self, sandbox: str, directory: str = "") -> ArchiveDownload:
        params = {"dir": directory} if directory else None
        response = self._request(
            "GET", f"/sandbox/{sandbox}/zip", params=params, stream=True
        )
        self._check(response, "failed to download zip")
        filename = parse_content_disposition(
            response.headers.get("Content-Disposition")
        )
        return ArchiveDownload(filename=filename, response=response)

    def list_files(
        self, sandbox: str, directory: str = "", max_depth: int = 0
    ) -> List[RemoteFile]:
        params: Dict[str, Any] = {}
        if directory:
            params["dir"] = directory
        if max_depth > 0:
            params["max_depth"] = max_depth

        action = "failed to list files"
        response = self._request(
            "GET", f"/sandbox/{sandbox}/files", params=params or None
        )
        self._check(response, action)
        data = self._envelope_data(response, action)
        try:
            return decode_list(RemoteFile, data)
        except (DaciteError, TypeError) as e:
            raise ResponseDecodeError(
                f"{action}: {e}", response.status_code, response.text
            ) from e

    def update_file(
        self,
        sandbox: str,
        path: str,
        content: str,
        file_type: str = "file",
        write_mode: str = "",
    ) -> None:
        body = {"path": path, "content": content, "type": file_type}
        if write_mode:
            body["write_mode"] = write_mode
        response = self._request("PUT", f"/sandbox/{sandbox}/files", json_body=body)
        self._check(response, "failed to update file")

    def upload_archive(
        self, sandbox: str, archive_path: str, target_path: str, format: str = ""
    ) -> None:
        """Upload a zip or tar.gz archive to be extracted at ``target_path``."""
        format = format or "zip"
        try:
            archive = open(archive_path, "rb")
        except OSError as e:
            raise FilesystemError(f"failed to open archive: {e}") from e

        with archive:
            response = self._request(
                "POST",
                f"/sandbox/{sandbox}/upload",
                files={"archive": (os.path.basename(archive_path), archive)},
                data={"path": target_path, "format": format},
            )
        self._check(response, "failed to upload archive")
