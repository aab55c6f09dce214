"""
================================================================================
Response Assertions
================================================================================

Assertion and extraction helpers for httpx responses from the CMS API.

Key Features:
- Status code checks: exact, 2xx range and set membership
- Header, Content-Type and response time checks
- JSONPath extraction with typed values for chaining test steps
- Array size / non-empty checks on top of extraction
- ProblemDetail / GenericMessage / HttpErrorResponse envelope decoding

Every check logs what it is about to verify (expected and actual) before
evaluating. Failures raise AssertionError carrying expected value, actual
value and, where useful, the full response body.

================================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, List, NoReturn, Optional, Union

import allure
import httpx
from loguru import logger

from .envelopes import GenericMessage, HttpErrorResponse, ProblemDetail
from .json_path import JsonPathError, JsonValue, evaluate, find, is_definite, parse_document
from .json_utils import EnvelopeDecodeError, from_json, to_pretty_json
from .tracing import redact_headers


JSON_MEDIA_TYPE = "application/json"
PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


def _fail(message: str, cause: Optional[BaseException] = None) -> NoReturn:
    logger.error(message)
    if cause is not None:
        raise AssertionError(message) from cause
    raise AssertionError(message)


def _body(response: httpx.Response) -> str:
    return response.text


# ================================================================================
# Status Code Assertions
# ================================================================================

@allure.step("Assert status code is {expected_status}")
def assert_status(response: httpx.Response, expected_status: int) -> None:
    """Exact status match; dumps the body on mismatch."""
    actual_status = response.status_code
    logger.info(f"Asserting status code - Expected: {expected_status}, Actual: {actual_status}")

    if actual_status != expected_status:
        _fail(
            f"Status code mismatch!\n"
            f"Expected: {expected_status}\n"
            f"Actual: {actual_status}\n"
            f"Response Body:\n{_body(response)}"
        )


@allure.step("Assert status code is 2xx")
def assert_success(response: httpx.Response) -> None:
    actual_status = response.status_code
    logger.info(f"Asserting success status code (2xx) - Actual: {actual_status}")

    if not 200 <= actual_status < 300:
        _fail(
            f"Expected success status code (2xx), but got: {actual_status}\n"
            f"Response Body:\n{_body(response)}"
        )


def _flatten_statuses(expected_statuses: Iterable[Union[int, Iterable[int]]]) -> List[int]:
    statuses: List[int] = []
    for item in expected_statuses:
        if isinstance(item, int):
            statuses.append(item)
        else:
            statuses.extend(item)
    return statuses


def assert_status_in(response: httpx.Response, *expected_statuses: Union[int, Iterable[int]]) -> None:
    """
    Status must be one of ``expected_statuses``.

    Accepts codes as varargs or as a single iterable:
        assert_status_in(response, 200, 201, 400)
        assert_status_in(response, [200, 201, 400])
    """
    statuses = _flatten_statuses(expected_statuses)
    if not statuses:
        raise ValueError("assert_status_in needs at least one expected status code")

    actual_status = response.status_code
    with allure.step(f"Assert status code in {statuses}"):
        logger.info(f"Asserting status code is one of: {statuses} - Actual: {actual_status}")

        if actual_status not in statuses:
            _fail(
                f"Status code not in expected set!\n"
                f"Expected one of: {statuses}\n"
                f"Actual: {actual_status}\n"
                f"Response Body:\n{_body(response)}"
            )


# ================================================================================
# Header Assertions
# ================================================================================

@allure.step("Assert header '{header_name}' exists")
def assert_header_exists(response: httpx.Response, header_name: str) -> None:
    logger.info(f"Asserting header exists: {header_name}")
    if response.headers.get(header_name) is None:
        _fail(
            f"Expected header '{header_name}' not found in response. "
            f"Headers: {redact_headers(dict(response.headers))}"
        )


@allure.step("Assert header '{header_name}' equals '{expected_value}'")
def assert_header_equals(response: httpx.Response, header_name: str, expected_value: str) -> None:
    actual_value = response.headers.get(header_name)
    logger.info(f"Asserting header {header_name} equals {expected_value} - Actual: {actual_value}")
    if actual_value != expected_value:
        _fail(
            f"Header '{header_name}' value mismatch. "
            f"Expected: {expected_value}, Actual: {actual_value}"
        )


def assert_content_type_json(response: httpx.Response, allow_problem_json: bool = False) -> None:
    """
    Content-Type must contain ``application/json``.

    Substring match, so charset parameters are accepted. With
    ``allow_problem_json`` the RFC 7807 media type is accepted as well.
    """
    content_type = response.headers.get("content-type")
    logger.info(f"Asserting Content-Type is JSON - Actual: {content_type}")

    accepted = [JSON_MEDIA_TYPE]
    if allow_problem_json:
        accepted.append(PROBLEM_JSON_MEDIA_TYPE)

    if content_type is None or not any(media in content_type for media in accepted):
        _fail(
            f"Expected Content-Type to contain '{' or '.join(accepted)}', "
            f"but got: {content_type}"
        )


# ================================================================================
# Response Time Assertions
# ================================================================================

@allure.step("Assert response time below {threshold_ms}ms")
def assert_response_time_below(response: httpx.Response, threshold_ms: float) -> None:
    """Elapsed time as reported by the transport must be below ``threshold_ms``."""
    actual_ms = response.elapsed.total_seconds() * 1000
    logger.info(f"Asserting response time below {threshold_ms}ms - Actual: {actual_ms:.0f}ms")

    if actual_ms >= threshold_ms:
        _fail(
            f"Response time exceeded threshold. "
            f"Expected: <{threshold_ms} ms, Actual: {actual_ms:.0f} ms"
        )


# ================================================================================
# JSON Path Extraction & Assertions
# ================================================================================

def extract(response: httpx.Response, json_path: str) -> Any:
    """
    Raw value at ``json_path`` in the response body.

    Typical chaining use:
        journey_slug = extract(response, "$.message")
        chapter_id = extract(response, "$.content[0].id")

    Raises:
        AssertionError: Body is not JSON, the path is invalid, or a
            definite path matched nothing
    """
    logger.info(f"Extracting JSON path: {json_path}")
    try:
        return find(parse_document(_body(response)), json_path)
    except JsonPathError as e:
        _fail(
            f"Failed to extract JSON path '{json_path}': {e}\n"
            f"Response Body:\n{_body(response)}",
            e,
        )


def extract_value(response: httpx.Response, json_path: str) -> JsonValue:
    """Like ``extract`` but returns a tagged JsonValue."""
    logger.info(f"Extracting JSON path: {json_path}")
    try:
        return evaluate(parse_document(_body(response)), json_path)
    except JsonPathError as e:
        _fail(
            f"Failed to extract JSON path '{json_path}': {e}\n"
            f"Response Body:\n{_body(response)}",
            e,
        )


@allure.step("Assert JSON path '{json_path}' exists")
def assert_json_path_exists(response: httpx.Response, json_path: str) -> None:
    logger.info(f"Asserting JSON path exists: {json_path}")
    value = extract(response, json_path)

    if value is None:
        _fail(f"JSON path '{json_path}' returned null")
    if value == [] and not is_definite(json_path):
        _fail(f"JSON path '{json_path}' matched nothing")


@allure.step("Assert JSON path '{json_path}' equals {expected_value}")
def assert_json_path_equals(response: httpx.Response, json_path: str, expected_value: Any) -> None:
    logger.info(f"Asserting JSON path {json_path} equals {expected_value!r}")
    actual_value = extract(response, json_path)

    if actual_value != expected_value:
        _fail(
            f"JSON path '{json_path}' value mismatch. "
            f"Expected: {expected_value!r}, Actual: {actual_value!r}"
        )


# ================================================================================
# Collection Assertions
# ================================================================================

def _extract_array(response: httpx.Response, json_path: str) -> List[Any]:
    value = extract_value(response, json_path)
    try:
        return value.as_list()
    except JsonPathError as e:
        _fail(f"Failed to extract array from JSON path '{json_path}': {e}", e)


@allure.step("Assert array at '{json_path}' has size {expected_size}")
def assert_array_size(response: httpx.Response, json_path: str, expected_size: int) -> None:
    logger.info(f"Asserting array at {json_path} has size {expected_size}")
    array = _extract_array(response, json_path)

    if len(array) != expected_size:
        _fail(
            f"Array size mismatch at '{json_path}'. "
            f"Expected: {expected_size}, Actual: {len(array)}"
        )


@allure.step("Assert array at '{json_path}' is not empty")
def assert_array_not_empty(response: httpx.Response, json_path: str) -> None:
    logger.info(f"Asserting array at {json_path} is not empty")
    array = _extract_array(response, json_path)

    if not array:
        _fail(f"Array at '{json_path}' should not be empty")


# ================================================================================
# Envelope Assertions
# ================================================================================

@allure.step("Assert ProblemDetail response")
def assert_problem_detail(
    response: httpx.Response,
    expected_status: Optional[int] = None,
    expected_title: Optional[str] = None,
) -> ProblemDetail:
    """
    Decode and validate an RFC 7807 error body.

    ``type`` and ``title`` must be present and ``status`` positive. When
    ``expected_status`` / ``expected_title`` are given they must match.

    Returns:
        The decoded ProblemDetail for further checks
    """
    logger.info("Asserting ProblemDetail response structure")
    assert_content_type_json(response, allow_problem_json=True)

    try:
        problem = from_json(_body(response), ProblemDetail)
    except EnvelopeDecodeError as e:
        logger.error(f"Failed to parse ProblemDetail response: {e}")
        _fail(
            f"Response is not a valid ProblemDetail: {e}\n"
            f"Response Body:\n{_body(response)}",
            e,
        )

    if problem.type is None:
        _fail(f"ProblemDetail 'type' field is null\nResponse Body:\n{_body(response)}")
    if problem.title is None:
        _fail(f"ProblemDetail 'title' field is null\nResponse Body:\n{_body(response)}")
    if problem.status <= 0:
        _fail(f"ProblemDetail 'status' is invalid: {problem.status}\nResponse Body:\n{_body(response)}")

    if problem.status != response.status_code:
        logger.warning(
            f"ProblemDetail status {problem.status} differs from HTTP status {response.status_code}"
        )

    logger.info(
        f"ProblemDetail validated - Type: {problem.type}, "
        f"Title: {problem.title}, Status: {problem.status}"
    )

    if expected_status is not None and problem.status != expected_status:
        _fail(
            f"ProblemDetail status mismatch. "
            f"Expected: {expected_status}, Actual: {problem.status}"
        )
    if expected_title is not None and problem.title != expected_title:
        _fail(
            f"ProblemDetail title mismatch. "
            f"Expected: {expected_title!r}, Actual: {problem.title!r}"
        )

    return problem


@allure.step("Assert GenericMessage response")
def assert_generic_message(
    response: httpx.Response,
    expected_message: Optional[str] = None,
) -> GenericMessage:
    """Decode a ``{"message": ...}`` body; ``message`` must be non-null."""
    logger.info("Asserting GenericMessage response structure")
    assert_content_type_json(response)

    try:
        generic_message = from_json(_body(response), GenericMessage)
    except EnvelopeDecodeError as e:
        logger.error(f"Failed to parse GenericMessage response: {e}")
        _fail(
            f"Response is not a valid GenericMessage: {e}\n"
            f"Response Body:\n{_body(response)}",
            e,
        )

    if generic_message.message is None:
        _fail(f"GenericMessage 'message' field is null\nResponse Body:\n{_body(response)}")

    logger.info(f"GenericMessage validated - Message: {generic_message.message}")

    if expected_message is not None and generic_message.message != expected_message:
        _fail(
            f"GenericMessage content mismatch. "
            f"Expected: {expected_message!r}, Actual: {generic_message.message!r}"
        )

    return generic_message


def assert_generic_message_contains(response: httpx.Response, expected_substring: str) -> GenericMessage:
    generic_message = assert_generic_message(response)
    logger.info(f"Asserting GenericMessage contains: {expected_substring}")

    if expected_substring not in generic_message.message:
        _fail(
            f"GenericMessage does not contain '{expected_substring}'. "
            f"Actual: {generic_message.message}"
        )
    return generic_message


@allure.step("Assert HttpErrorResponse")
def assert_http_error_response(
    response: httpx.Response,
    expected_status: Optional[int] = None,
) -> HttpErrorResponse:
    """Decode the legacy ``{httpStatusCode, httpStatus, reason, message}`` error body."""
    logger.info("Asserting HttpErrorResponse response structure")
    assert_content_type_json(response)

    try:
        error = from_json(_body(response), HttpErrorResponse)
    except EnvelopeDecodeError as e:
        logger.error(f"Failed to parse HttpErrorResponse response: {e}")
        _fail(
            f"Response is not a valid HttpErrorResponse: {e}\n"
            f"Response Body:\n{_body(response)}",
            e,
        )

    if error.http_status_code <= 0:
        _fail(
            f"HttpErrorResponse 'httpStatusCode' is invalid: {error.http_status_code}\n"
            f"Response Body:\n{_body(response)}"
        )

    logger.info(
        f"HttpErrorResponse validated - Status: {error.http_status_code} "
        f"{error.http_status}, Reason: {error.reason}"
    )

    if expected_status is not None and error.http_status_code != expected_status:
        _fail(
            f"HttpErrorResponse status mismatch. "
            f"Expected: {expected_status}, Actual: {error.http_status_code}"
        )

    return error


# ================================================================================
# Body Assertions & Utilities
# ================================================================================

def log_response(response: httpx.Response) -> None:
    """Log full response details (for debugging)."""
    logger.info(f"Response Status: {response.status_code}")
    logger.info(f"Response Time: {response.elapsed.total_seconds() * 1000:.0f}ms")
    logger.info(f"Response Headers: {redact_headers(dict(response.headers))}")
    try:
        body = to_pretty_json(response.json())
    except ValueError:
        body = _body(response)
    logger.info(f"Response Body:\n{body}")


@allure.step("Assert response body is not empty")
def assert_body_not_empty(response: httpx.Response) -> None:
    logger.info("Asserting response body is not empty")
    if not _body(response).strip():
        _fail(f"Response body is empty (status {response.status_code})")


@allure.step("Assert response body contains '{expected_substring}'")
def assert_body_contains(response: httpx.Response, expected_substring: str) -> None:
    logger.info(f"Asserting response body contains: {expected_substring}")
    body = _body(response)
    if expected_substring not in body:
        _fail(
            f"Response body does not contain '{expected_substring}'\n"
            f"Response Body:\n{body}"
        )


# ================================================================================
# Fluent Interface
# ================================================================================

class ResponseExpectation:
    """
    Chainable wrapper over the assertion functions.

    Example:
        expect_response(response).status_in(200, 201).content_type_json()
        slug = expect_response(response).success().extract("$.message")
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response

    def status(self, expected_status: int) -> "ResponseExpectation":
        assert_status(self.response, expected_status)
        return self

    def success(self) -> "ResponseExpectation":
        assert_success(self.response)
        return self

    def status_in(self, *expected_statuses: Union[int, Iterable[int]]) -> "ResponseExpectation":
        assert_status_in(self.response, *expected_statuses)
        return self

    def header_exists(self, header_name: str) -> "ResponseExpectation":
        assert_header_exists(self.response, header_name)
        return self

    def header_equals(self, header_name: str, expected_value: str) -> "ResponseExpectation":
        assert_header_equals(self.response, header_name, expected_value)
        return self

    def content_type_json(self) -> "ResponseExpectation":
        assert_content_type_json(self.response)
        return self

    def response_time_below(self, threshold_ms: float) -> "ResponseExpectation":
        assert_response_time_below(self.response, threshold_ms)
        return self

    def json_path_exists(self, json_path: str) -> "ResponseExpectation":
        assert_json_path_exists(self.response, json_path)
        return self

    def json_path_equals(self, json_path: str, expected_value: Any) -> "ResponseExpectation":
        assert_json_path_equals(self.response, json_path, expected_value)
        return self

    def array_size(self, json_path: str, expected_size: int) -> "ResponseExpectation":
        assert_array_size(self.response, json_path, expected_size)
        return self

    def array_not_empty(self, json_path: str) -> "ResponseExpectation":
        assert_array_not_empty(self.response, json_path)
        return self

    def body_not_empty(self) -> "ResponseExpectation":
        assert_body_not_empty(self.response)
        return self

    def body_contains(self, expected_substring: str) -> "ResponseExpectation":
        assert_body_contains(self.response, expected_substring)
        return self

    def extract(self, json_path: str) -> Any:
        return extract(self.response, json_path)

    def extract_value(self, json_path: str) -> JsonValue:
        return extract_value(self.response, json_path)

    def problem_detail(
        self,
        expected_status: Optional[int] = None,
        expected_title: Optional[str] = None,
    ) -> ProblemDetail:
        return assert_problem_detail(self.response, expected_status, expected_title)

    def generic_message(self, expected_message: Optional[str] = None) -> GenericMessage:
        return assert_generic_message(self.response, expected_message)


def expect_response(response: httpx.Response) -> ResponseExpectation:
    return ResponseExpectation(response)


__all__ = [
    "ResponseExpectation",
    "assert_array_not_empty",
    "assert_array_size",
    "assert_body_contains",
    "assert_body_not_empty",
    "assert_content_type_json",
    "assert_generic_message",
    "assert_generic_message_contains",
    "assert_header_equals",
    "assert_header_exists",
    "assert_http_error_response",
    "assert_json_path_equals",
    "assert_json_path_exists",
    "assert_problem_detail",
    "assert_response_time_below",
    "assert_status",
    "assert_status_in",
    "assert_success",
    "expect_response",
    "extract",
    "extract_value",
    "log_response",
]
