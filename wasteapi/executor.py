"""
Request Executor

Sends one HTTP request and returns parsed JSON or fails deterministically.
No retries. No recovery. Every failure is a typed WasteApiError.

Flow:
1. Join path onto the base endpoint
2. Attach the bearer token if one is held (read once per request)
3. Encode the body: JSON with Content-Type, or multipart without it
4. Read the full body as text
5. Reject text that does not start with '{' or '['
6. Parse JSON, then reject non-2xx with the server's message
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .credentials import CredentialHolder
from .errors import ApiError, MalformedResponseError, NetworkError
from .schemas import HttpMethod, MultipartForm, NormalizedResponse, RequestDescriptor

logger = logging.getLogger(__name__)

JSON_PREFIXES = ("{", "[")


def error_message(data: Any, status_code: int) -> str:
    """Server message for a failed response: message, then error, then generic."""
    if isinstance(data, Mapping):
        for key in ("message", "error"):
            value = data.get(key)
            if value:
                return str(value)
    return f"HTTP Error: {status_code}"


def parse_json_text(text: str, status_code: Optional[int] = None) -> Any:
    """
    Strictly parse a response body.

    Raises:
        MalformedResponseError: Text is not JSON-shaped or does not parse
    """
    if not text.startswith(JSON_PREFIXES):
        raise MalformedResponseError(
            text,
            status_code,
            detail=f"Server returned non-JSON response: {text[:200]}",
        )
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(text, status_code, detail=str(e)) from e


class RequestExecutor:
    """
    Generic request executor bound to one base endpoint.

    Guarantees:
    - Authorization header iff a token is held at call time
    - Content-Type: application/json for non-multipart requests only
    - Never returns partial data
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialHolder,
        http_client: httpx.AsyncClient,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.http_client = http_client

    def build_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def build_headers(self, descriptor: RequestDescriptor) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if not descriptor.is_multipart:
            headers["Content-Type"] = "application/json"
        headers.update(self.credentials.authorization_header())
        headers.update(descriptor.headers)
        return headers

    async def request(
        self,
        path: str,
        method: HttpMethod = "GET",
        json_body: Optional[Any] = None,
        form: Optional[MultipartForm] = None,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> NormalizedResponse:
        """Convenience wrapper building the RequestDescriptor."""
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            json_body=json_body,
            form=form,
            headers=headers or {},
            params=params,
        )
        return await self.execute(descriptor)

    async def execute(self, descriptor: RequestDescriptor) -> NormalizedResponse:
        """
        Send the request described by ``descriptor``.

        Returns:
            NormalizedResponse with parsed body and status

        Raises:
            NetworkError: Transport failed
            MalformedResponseError: Body is not JSON-shaped
            ApiError: Status outside 2xx
        """
        url = self.build_url(descriptor.path)
        headers = self.build_headers(descriptor)

        send_kwargs: Dict[str, Any] = {"headers": headers}
        if descriptor.params:
            send_kwargs["params"] = descriptor.params
        if descriptor.form is not None:
            send_kwargs["files"] = descriptor.form.to_httpx_files()
        elif descriptor.json_body is not None:
            send_kwargs["content"] = json.dumps(descriptor.json_body)

        logger.info(
            f"API Request: {descriptor.method} {url}",
            extra={"method": descriptor.method, "url": url, "multipart": descriptor.is_multipart},
        )

        try:
            response = await self.http_client.request(descriptor.method, url, **send_kwargs)
        except httpx.TransportError as e:
            logger.error(f"API Request failed: {descriptor.method} {url}: {e}", exc_info=True)
            raise NetworkError(f"Network request failed: {e}") from e

        text = response.text
        status_code = response.status_code
        logger.debug(f"Raw response ({status_code}): {text[:500]}")

        try:
            data = parse_json_text(text, status_code)
        except MalformedResponseError:
            logger.error(
                f"Malformed response from {url}",
                extra={"status_code": status_code, "raw_text": text[:500]},
            )
            raise

        if not 200 <= status_code < 300:
            message = error_message(data, status_code)
            logger.error(
                f"API Error {status_code}: {message}",
                extra={"status_code": status_code, "url": url},
            )
            raise ApiError(status_code, message, payload=data)

        logger.info(f"Response status: {status_code}", extra={"status_code": status_code})
        return NormalizedResponse(status_code=status_code, data=data)
