"""
================================================================================
Request/Response Tracing
================================================================================

Tracing filters run after every dispatched request template:
    - One log line per call (method, URI, status, elapsed)
    - Allure step with URL, headers, body, query, cURL and response
    - Sensitive header and body values masked before anything is written

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional

import allure
import httpx
from allure_commons.types import AttachmentType
from loguru import logger

from .json_utils import to_json


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000

MASK = "***MASKED***"
STREAMED_BODY = "<streamed body>"

SENSITIVE_HEADERS = {"authorization", "x-api-key", "cookie", "set-cookie"}
SENSITIVE_BODY_KEYS = ("password", "secret", "token", "api_key", "authorization", "session")

TraceFilter = Callable[[httpx.Request, httpx.Response], None]


def redact_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive header values before logging."""
    masked = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            masked[key] = MASK
        else:
            masked[key] = value
    return masked


def redact_body(payload: Any) -> Any:
    """Recursively mask sensitive fields in request bodies."""
    if isinstance(payload, dict):
        redacted = {}
        for key, value in payload.items():
            if any(token in key.lower() for token in SENSITIVE_BODY_KEYS):
                redacted[key] = MASK
            else:
                redacted[key] = redact_body(value)
        return redacted
    if isinstance(payload, list):
        return [redact_body(item) for item in payload]
    return payload


def build_curl(
    method: str,
    url: str,
    headers: Dict[str, str],
    body: Optional[Any],
) -> str:
    """Copy-paste ready cURL command for reproducing a request."""
    parts = [f"curl -X {method}"]

    for key, value in headers.items():
        parts.append(f"-H '{key}: {value}'")

    if body == STREAMED_BODY:
        parts.append("-F '<multipart body>'")
    elif body:
        parts.append(f"-d '{to_json(body)}'")

    parts.append(f"'{url}'")

    return " \\\n  ".join(parts)


def _request_body(request: httpx.Request) -> Any:
    # Multipart uploads are streamed and never buffered on the request
    if not isinstance(request.stream, httpx.ByteStream):
        return STREAMED_BODY
    content = request.content
    if not content:
        return None
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return content.decode("utf-8", errors="replace")


def _response_content(response: httpx.Response) -> str:
    try:
        content = json.dumps(response.json(), ensure_ascii=False, indent=2)
    except (json.JSONDecodeError, ValueError):
        content = response.text or "<empty>"

    if len(content) > MAX_RESPONSE_LENGTH:
        content = (
            f"{content[:MAX_RESPONSE_LENGTH]}\n\n"
            f"... [Truncated, full length: {len(content)} chars] ..."
        )
    return content


def log_request(request: httpx.Request, response: httpx.Response) -> None:
    """Log method and URI of a finished call."""
    elapsed_ms = int(response.elapsed.total_seconds() * 1000)
    logger.info(
        f"{request.method} {request.url} -> {response.status_code} ({elapsed_ms}ms)"
    )


class AllureTraceFilter:
    """
    Attaches request/response details to the Allure report.

    Attaches:
        - Request URL with query parameters
        - Request headers (redacted)
        - Request body (redacted, if present)
        - cURL command for reproduction
        - Response status
        - Response body (truncated if too long)
    """

    def __call__(self, request: httpx.Request, response: httpx.Response) -> None:
        log_request(request, response)

        status_icon = "PASS" if response.status_code < 400 else "FAIL"
        step_title = f"[{status_icon}] {request.method} {request.url.path} -> {response.status_code}"

        with allure.step(step_title):
            allure.attach(
                str(request.url),
                name="Request URL",
                attachment_type=AttachmentType.TEXT,
            )

            safe_headers = redact_headers(dict(request.headers))
            if safe_headers:
                allure.attach(
                    json.dumps(safe_headers, ensure_ascii=False, indent=2),
                    name="Request Headers",
                    attachment_type=AttachmentType.JSON,
                )

            safe_body = redact_body(_request_body(request))
            if safe_body:
                allure.attach(
                    json.dumps(safe_body, ensure_ascii=False, indent=2),
                    name="Request Body",
                    attachment_type=AttachmentType.JSON,
                )

            params = dict(request.url.params)
            if params:
                allure.attach(
                    json.dumps(params, ensure_ascii=False, indent=2),
                    name="Query Params",
                    attachment_type=AttachmentType.JSON,
                )

            allure.attach(
                build_curl(request.method, str(request.url), safe_headers, safe_body),
                name="cURL Command",
                attachment_type=AttachmentType.TEXT,
            )

            allure.attach(
                f"{status_icon} {response.status_code}",
                name="Response Status",
                attachment_type=AttachmentType.TEXT,
            )

            allure.attach(
                _response_content(response),
                name="Response Body",
                attachment_type=AttachmentType.JSON,
            )

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AllureTraceFilter)

    def __hash__(self) -> int:
        return hash(AllureTraceFilter)


__all__ = [
    "AllureTraceFilter",
    "MASK",
    "TraceFilter",
    "build_curl",
    "log_request",
    "redact_body",
    "redact_headers",
]
