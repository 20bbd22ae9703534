"""Shared test helpers: mock transport recording and multipart parsing."""

import json
import re

import httpx


BASE_URL = "https://api.example.test/api"


def json_response(status_code: int, payload) -> httpx.Response:
    return httpx.Response(status_code, text=json.dumps(payload))


class RecordingHandler:
    """
    MockTransport handler that records every request it sees.

    ``responses`` is either one response reused for every call, a list
    consumed in order, or a callable(request) -> response (sync or async).
    """

    def __init__(self, responses=None):
        self.calls = []
        self._responses = responses if responses is not None else json_response(200, {})

    def __call__(self, request: httpx.Request):
        self.calls.append(request)
        if callable(self._responses):
            return self._responses(request)
        if isinstance(self._responses, list):
            return self._responses.pop(0)
        return self._responses

    @property
    def last(self) -> httpx.Request:
        return self.calls[-1]


def parse_multipart(request: httpx.Request) -> dict:
    """
    Split a multipart/form-data request into its parts.

    Returns:
        {field name: {"filename": str|None, "content_type": str|None, "content": bytes}}
    """
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data")
    boundary = content_type.split("boundary=", 1)[1].encode()

    parts = {}
    for chunk in request.content.split(b"--" + boundary):
        if not chunk or chunk.startswith(b"--"):
            continue
        chunk = chunk[2:-2]  # surrounding CRLFs
        head, _, body = chunk.partition(b"\r\n\r\n")
        head_text = head.decode()
        name = re.search(r'name="([^"]+)"', head_text).group(1)
        filename = re.search(r'filename="([^"]*)"', head_text)
        part_type = re.search(r"Content-Type: (.+)", head_text)
        parts[name] = {
            "filename": filename.group(1) if filename else None,
            "content_type": part_type.group(1).strip() if part_type else None,
            "content": body,
        }
    return parts


def form_text(parts: dict) -> dict:
    """Text-only view of parsed multipart parts."""
    return {
        name: part["content"].decode()
        for name, part in parts.items()
        if part["filename"] is None
    }
