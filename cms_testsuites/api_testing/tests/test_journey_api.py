"""
================================================================================
Journey API Test Suite
================================================================================

Journey listing, creation and role-based access checks.

Test Categories:
    - Listing: paging, response shape
    - Creation: GenericMessage slug chaining into follow-up calls
    - Authorization: anonymous and per-role access

================================================================================
"""

from __future__ import annotations

import allure
import pytest

from ..framework import AuthContext, HttpClient, RequestSpecFactory, UserType
from ..framework.response_assertions import (
    assert_generic_message,
    assert_problem_detail,
    assert_status_in,
    expect_response,
)


JOURNEYS_PATH = "/api/v1/journeys"
JOURNEY_PATH = "/api/v1/journey/{journeyId}"


@allure.epic("Content Management API")
@allure.feature("Journeys")
class TestJourneyAPI:

    @pytest.mark.P0
    @pytest.mark.smoke
    @allure.story("List Journeys")
    @allure.title("List journeys as admin - Success")
    def test_list_journeys(self, http_client: HttpClient, spec_factory: RequestSpecFactory):
        template = spec_factory.admin().with_query_params(page=0, size=10)

        response = http_client.get(template, JOURNEYS_PATH)

        (
            expect_response(response)
            .status(200)
            .content_type_json()
            .response_time_below(3000)
            .json_path_exists("$.content")
        )

    @pytest.mark.P0
    @allure.story("Create Journey")
    @allure.title("Create journey and fetch it by returned slug")
    def test_create_journey_then_fetch(
        self,
        http_client: HttpClient,
        spec_factory: RequestSpecFactory,
        unique_id: str,
    ):
        with allure.step("Create journey"):
            response = http_client.post(
                spec_factory.editor().with_json({"title": f"Journey {unique_id}"}),
                JOURNEYS_PATH,
            )
            assert_status_in(response, 200, 201)
            journey_slug = assert_generic_message(response).message

        with allure.step("Fetch created journey"):
            template = spec_factory.editor().with_path_params(journeyId=journey_slug)
            response = http_client.get(template, JOURNEY_PATH)
            assert_status_in(response, 200)

    @pytest.mark.P1
    @allure.story("Create Journey")
    @allure.title("Create journey without title - Bad Request")
    def test_create_journey_missing_title(self, http_client: HttpClient, spec_factory: RequestSpecFactory):
        response = http_client.post(spec_factory.admin().with_json({}), JOURNEYS_PATH)

        assert_status_in(response, 400)
        assert_problem_detail(response, expected_status=400)

    @pytest.mark.P1
    @pytest.mark.auth
    @allure.story("Authorization")
    @allure.title("List journeys without token - Unauthorized")
    def test_list_journeys_anonymous(self, http_client: HttpClient, spec_factory: RequestSpecFactory):
        response = http_client.get(spec_factory.without_auth(), JOURNEYS_PATH)

        assert_status_in(response, 401, 403)

    @pytest.mark.P1
    @pytest.mark.auth
    @allure.story("Authorization")
    @allure.title("List journeys after clearing the current user - Unauthorized")
    def test_cleared_context_sends_no_token(
        self,
        http_client: HttpClient,
        spec_factory: RequestSpecFactory,
        auth_context: AuthContext,
    ):
        auth_context.clear()

        response = http_client.get(spec_factory.for_current_user(), JOURNEYS_PATH)

        assert_status_in(response, 401, 403)

    @pytest.mark.P2
    @pytest.mark.auth
    @pytest.mark.parametrize("role", list(UserType))
    @allure.story("Authorization")
    @allure.title("List journeys per role")
    def test_list_journeys_per_role(
        self,
        http_client: HttpClient,
        spec_factory: RequestSpecFactory,
        auth_context: AuthContext,
        role: UserType,
    ):
        if not auth_context.has_token(role):
            pytest.skip(f"No token configured for {role.role}")

        response = http_client.get(spec_factory.for_role(role), JOURNEYS_PATH)

        assert_status_in(response, 200, 403)
