"""
================================================================================
HTTP Client for Request Templates
================================================================================

Dispatches a RequestTemplate with httpx:
    - Fills path placeholders and query parameters from the template
    - Sends the template's headers untouched (auth is decided at build time)
    - Runs the template's tracing filters on the finished exchange

One request, one response: no retries, no pooling beyond the httpx session
owned by the context manager.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from loguru import logger

from .config_loader import ConfigLoader
from .request_spec import RequestTemplate


DEFAULT_TIMEOUT = 30


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class HttpClient:
    """
    Sends request templates and returns the raw httpx.Response.

    Usage:
        >>> factory = RequestSpecFactory()
        >>> with HttpClient() as client:
        ...     template = factory.admin().with_path_params(journeyId="j-1")
        ...     response = client.get(template, "/api/v1/journey/{journeyId}")
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Configuration loader instance. Creates new one if None.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        if config is None:
            config = ConfigLoader()

        self.config = config
        self.timeout = int(config.get("api.timeout", DEFAULT_TIMEOUT))
        self.transport = transport
        self.session: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpClient":
        """Enter context manager - initialize HTTP session."""
        self.session = httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - close HTTP session."""
        if self.session:
            self.session.close()
            self.session = None

    def send(self, template: RequestTemplate, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Execute ``method`` on ``path`` using ``template``.

        Args:
            template: Request template from RequestSpecFactory
            method: HTTP method (GET, POST, PUT, DELETE, PATCH)
            path: Path relative to the template's base URL; may contain
                  ``{name}`` placeholders bound via with_path_params
            **kwargs: Extra httpx arguments (files, data, content)

        Returns:
            httpx.Response object
        """
        if self.session is None:
            raise HttpClientError(
                "HttpClient must be used within a context manager. "
                "Use 'with HttpClient() as client:'"
            )

        url = template.resolve_url(path)
        request_kwargs = dict(kwargs)
        if template.json_body is not None:
            request_kwargs["json"] = template.json_body

        headers = dict(template.headers)
        if "files" in request_kwargs:
            # httpx sets multipart/form-data with its boundary
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}

        request = self.session.build_request(
            method.upper(),
            url,
            headers=headers,
            params=dict(template.query_params) or None,
            **request_kwargs,
        )

        logger.debug(f"Dispatching {request.method} {request.url}")
        response = self.session.send(request)
        # Body is already buffered; closing sets response.elapsed
        response.close()

        for trace_filter in template.filters:
            trace_filter(request, response)

        return response

    def get(self, template: RequestTemplate, path: str, **kwargs: Any) -> httpx.Response:
        """Execute GET request."""
        return self.send(template, "GET", path, **kwargs)

    def post(self, template: RequestTemplate, path: str, **kwargs: Any) -> httpx.Response:
        """Execute POST request."""
        return self.send(template, "POST", path, **kwargs)

    def put(self, template: RequestTemplate, path: str, **kwargs: Any) -> httpx.Response:
        """Execute PUT request."""
        return self.send(template, "PUT", path, **kwargs)

    def patch(self, template: RequestTemplate, path: str, **kwargs: Any) -> httpx.Response:
        """Execute PATCH request."""
        return self.send(template, "PATCH", path, **kwargs)

    def delete(self, template: RequestTemplate, path: str, **kwargs: Any) -> httpx.Response:
        """Execute DELETE request."""
        return self.send(template, "DELETE", path, **kwargs)


__all__ = [
    "HttpClient",
    "HttpClientError",
]
