"""
================================================================================
API Testing Framework
================================================================================

Core of the CMS API automation harness.

Modules:
    - config_loader: YAML configuration management
    - credential_store: Role to bearer-token resolution
    - auth_context: Per-thread authentication state
    - request_spec: Request templates and their factory
    - http_client: Template dispatch over httpx
    - tracing: Request/response logging and Allure attachments
    - json_path: JSONPath evaluation with tagged values
    - envelopes: ProblemDetail / GenericMessage / HttpErrorResponse
    - response_assertions: Status, header, timing, path and envelope checks

Author: Automation Team
License: MIT
================================================================================
"""

from .auth_context import AuthContext, ExecutionContext
from .config_loader import ConfigLoader, ConfigurationError
from .credential_store import CredentialStore
from .envelopes import GenericMessage, HttpErrorResponse, ProblemDetail
from .http_client import HttpClient, HttpClientError
from .json_path import JsonKind, JsonPathError, JsonValue
from .json_utils import EnvelopeDecodeError
from .request_spec import RequestSpecFactory, RequestTemplate, RequestTemplateError
from .user_type import UserType

__all__ = [
    "AuthContext",
    "ConfigLoader",
    "ConfigurationError",
    "CredentialStore",
    "EnvelopeDecodeError",
    "ExecutionContext",
    "GenericMessage",
    "HttpClient",
    "HttpClientError",
    "HttpErrorResponse",
    "JsonKind",
    "JsonPathError",
    "JsonValue",
    "ProblemDetail",
    "RequestSpecFactory",
    "RequestTemplate",
    "RequestTemplateError",
    "UserType",
]
