"""
Tests for custom exception classes and the global exception handlers
"""

import pytest
from fastapi import FastAPI, HTTPException, status
from fastapi.testclient import TestClient

from attachments_inspector.exception_handlers import (
    create_error_response,
    get_error_type,
    get_http_error_code,
    register_exception_handlers,
)
from attachments_inspector.exceptions import (
    AssetRegistrationError,
    AuthenticationError,
    AuthorizationError,
    ErrorCode,
    InspectorError,
    InvalidTokenError,
    PostNotFoundError,
    ResourceNotFoundError,
    TokenExpiredError,
    is_error,
)


class TestInspectorError:
    def test_defaults(self):
        exc = InspectorError("Test error")

        assert str(exc) == "Test error"
        assert exc.status_code == 500
        assert exc.details == {}
        assert exc.error_code == ErrorCode.INTERNAL_ERROR

    def test_error_code_override(self):
        exc = InspectorError("Nope", error_code=ErrorCode.ASSET_REGISTRATION_FAILED)

        assert exc.error_code == ErrorCode.ASSET_REGISTRATION_FAILED


class TestAuthExceptions:
    def test_authentication_error(self):
        exc = AuthenticationError()

        assert exc.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc.error_code == ErrorCode.AUTH_FAILED

    def test_token_errors_are_authentication_errors(self):
        assert isinstance(TokenExpiredError(), AuthenticationError)
        assert InvalidTokenError().error_code == ErrorCode.AUTH_TOKEN_INVALID

    def test_authorization_error(self):
        exc = AuthorizationError("Sorry, you are not allowed to do that.", required_permission="edit_posts")

        assert exc.status_code == status.HTTP_403_FORBIDDEN
        assert exc.details == {"required_permission": "edit_posts"}

    def test_authorization_error_without_permission(self):
        assert AuthorizationError().details == {}


class TestNotFoundExceptions:
    def test_resource_not_found(self):
        exc = ResourceNotFoundError("Widget")

        assert exc.message == "Widget not found"
        assert exc.status_code == 404

    def test_post_not_found(self):
        exc = PostNotFoundError(42)

        assert exc.message == "Post with id '42' not found"
        assert exc.details == {"resource_type": "Post", "resource_id": 42}
        assert exc.error_code == ErrorCode.RESOURCE_POST_NOT_FOUND


class TestErrorValues:
    def test_asset_registration_error(self):
        exc = AssetRegistrationError("prc-platform-attachment-report")

        assert exc.message == "Failed to register all assets"
        assert exc.handle == "prc-platform-attachment-report"

    @pytest.mark.parametrize("value, expected", [(AssetRegistrationError("h"), True), (True, False), (None, False)])
    def test_is_error(self, value, expected):
        assert is_error(value) is expected


class TestErrorResponses:
    def test_error_types(self):
        assert get_error_type(403) == "Forbidden"
        assert get_error_type(405) == "Method Not Allowed"
        assert get_error_type(418) == "Error"

    def test_http_error_codes(self):
        assert get_http_error_code(404) == "RESOURCE_NOT_FOUND"
        assert get_http_error_code(418) == "UNKNOWN_ERROR"

    def test_create_error_response_omits_empty_fields(self):
        response = create_error_response(404, "Gone")

        assert response.body == b'{"error":{"status_code":404,"message":"Gone","type":"Not Found"}}'

    def test_create_error_response_accepts_code_strings(self):
        response = create_error_response(401, "Who?", "AUTH_FAILED", path="/x")

        assert b'"error_code":"AUTH_FAILED"' in response.body
        assert b'"path":"/x"' in response.body


@pytest.fixture
def handler_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/forbidden")
    async def forbidden():
        raise AuthorizationError(required_permission="edit_posts")

    @app.get("/unauthorized")
    async def unauthorized():
        raise AuthenticationError()

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="I'm a teapot")

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"item_id": item_id}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    def test_inspector_error(self, handler_client):
        response = handler_client.get("/forbidden")

        assert response.status_code == 403
        error = response.json()["error"]
        assert error["error_code"] == "AUTH_PERMISSION_DENIED"
        assert error["details"] == {"required_permission": "edit_posts"}
        assert error["path"] == "/forbidden"

    def test_unauthorized_sets_challenge_header(self, handler_client):
        response = handler_client.get("/unauthorized")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_http_exception(self, handler_client):
        response = handler_client.get("/teapot")

        assert response.status_code == 418
        assert response.json()["error"]["message"] == "I'm a teapot"

    def test_unknown_route(self, handler_client):
        response = handler_client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "RESOURCE_NOT_FOUND"

    def test_wrong_method(self, handler_client):
        response = handler_client.post("/forbidden")

        assert response.status_code == 405
        assert response.json()["error"]["type"] == "Method Not Allowed"
        assert "GET" in response.headers["allow"]

    def test_validation_error(self, handler_client):
        response = handler_client.get("/items/abc")

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["error_code"] == "VALIDATION_FAILED"
        assert error["details"]["validation_errors"][0]["field"] == "path.item_id"

    def test_unhandled_error_hides_internals(self, handler_client):
        response = handler_client.get("/boom")

        assert response.status_code == 500
        assert "secret internals" not in response.text
        assert response.json()["error"]["error_code"] == "INTERNAL_ERROR"
