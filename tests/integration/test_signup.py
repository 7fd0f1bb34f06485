"""Integration tests for POST /signup."""

from contextlib import asynccontextmanager
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings, CaptchaSettings, LoggingSettings, SentrySettings
from errors import register_error_handlers
from infrastructure.captcha.recaptcha import RECAPTCHA_VERIFY_URL, RecaptchaProvider
from infrastructure.http_client import HttpClient
from routes.signup_routes import router as signup_router
from services.signup_service import SignupService

VALID_BODY = {
    "recaptchaToken": "client-token",
    "email": "user@example.com",
    "password": "hunter2",
}


def _upstream(payload=None, *, exc=None, calls=None):
    """Build an httpx.MockTransport standing in for the verification service."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if exc is not None:
            raise exc
        return httpx.Response(200, json=payload)

    return httpx.MockTransport(handler)


def _build_test_app(transport: httpx.MockTransport, secret: str = "server-secret") -> FastAPI:
    """
    Build a minimal FastAPI app whose CAPTCHA provider talks to ``transport``.
    No real network connections are made.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with HttpClient(transport=transport) as http:
            app.state.signup_service = SignupService(RecaptchaProvider(secret, http))
            yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(signup_router)
    return app


def _post(app: FastAPI, **kwargs) -> httpx.Response:
    with TestClient(app) as client:
        return client.post("/signup", **kwargs)


class TestSignupValidation:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"email": "user@example.com", "password": "hunter2"},
            {"recaptchaToken": "", "email": "user@example.com", "password": "hunter2"},
            {"recaptchaToken": None},
        ],
        ids=["empty", "no_token", "blank_token", "null_token"],
    )
    def test_missing_token(self, body):
        calls = []
        resp = _post(_build_test_app(_upstream({"success": True}, calls=calls)), json=body)
        assert resp.status_code == 400
        assert resp.json() == {"message": "recaptchaToken is required"}
        assert calls == []

    @pytest.mark.parametrize(
        "body",
        [
            {"recaptchaToken": "t", "password": "hunter2"},
            {"recaptchaToken": "t", "email": "user@example.com"},
            {"recaptchaToken": "t", "email": "", "password": ""},
        ],
        ids=["no_email", "no_password", "both_blank"],
    )
    def test_missing_credentials(self, body):
        calls = []
        resp = _post(_build_test_app(_upstream({"success": True}, calls=calls)), json=body)
        assert resp.status_code == 400
        assert resp.json() == {"message": "email and password are required."}
        assert calls == []

    def test_snake_case_token_key_not_accepted(self):
        calls = []
        app = _build_test_app(_upstream({"success": True}, calls=calls))
        body = {
            "recaptcha_token": "client-token",
            "email": "user@example.com",
            "password": "hunter2",
        }
        resp = _post(app, json=body)
        assert resp.status_code == 400
        assert resp.json() == {"message": "recaptchaToken is required"}
        assert calls == []

    @pytest.mark.parametrize(
        "content",
        [b"", b"{not json", b"[1, 2, 3]", b'"just a string"'],
        ids=["no_body", "invalid_json", "array", "string"],
    )
    def test_malformed_body_is_treated_as_empty(self, content):
        app = _build_test_app(_upstream({"success": True}))
        resp = _post(app, content=content, headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "recaptchaToken is required"}


class TestSignupVerification:
    def test_success(self):
        resp = _post(_build_test_app(_upstream({"success": True})), json=VALID_BODY)
        assert resp.status_code == 201
        assert resp.json() == {"message": "Congratulations! We think you are human."}

    def test_upstream_rejection_joins_codes(self):
        upstream = _upstream(
            {
                "success": False,
                "error-codes": ["invalid-input-response", "timeout-or-duplicate"],
            }
        )
        resp = _post(_build_test_app(upstream), json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "invalid-input-response.timeout-or-duplicate"}

    def test_upstream_rejection_with_non_string_code(self):
        upstream = _upstream({"success": False, "error-codes": ["bad-request", 7]})
        resp = _post(_build_test_app(upstream), json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "bad-request.7"}

    def test_upstream_rejection_without_codes(self):
        resp = _post(_build_test_app(_upstream({"success": False})), json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": ""}

    @pytest.mark.parametrize(
        "exc",
        [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")],
        ids=["connect_error", "timeout"],
    )
    def test_transport_failure(self, exc):
        resp = _post(_build_test_app(_upstream(exc=exc)), json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "oops, something went wrong on our side"}

    def test_upstream_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
        resp = _post(_build_test_app(transport), json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "oops, something went wrong on our side"}

    def test_sends_secret_and_token_as_form(self):
        calls = []
        _post(_build_test_app(_upstream({"success": True}, calls=calls)), json=VALID_BODY)
        assert len(calls) == 1
        request = calls[0]
        assert str(request.url) == RECAPTCHA_VERIFY_URL
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "secret": ["server-secret"],
            "response": ["client-token"],
        }

    def test_missing_secret_reported_without_call(self):
        calls = []
        app = _build_test_app(_upstream({"success": True}, calls=calls), secret="")
        resp = _post(app, json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "missing-input-secret"}
        assert calls == []

    def test_repeated_requests_same_response(self):
        app = _build_test_app(_upstream({"success": True}))
        with TestClient(app) as client:
            statuses = {client.post("/signup", json=VALID_BODY).status_code for _ in range(3)}
        assert statuses == {201}


class TestUnhandledErrors:
    def test_unexpected_exception_is_generic_500(self):
        app = _build_test_app(_upstream(exc=RuntimeError("kaboom")))
        with TestClient(app, raise_server_exceptions=False) as client:
            resp = client.post("/signup", json=VALID_BODY)
        assert resp.status_code == 500
        assert resp.json() == {"message": "oops, something went wrong on our side"}


# ── create_app wiring ─────────────────────────────────────────────────────────


def _settings(secret: str = "server-secret") -> AppSettings:
    return AppSettings(
        captcha=CaptchaSettings(captcha_secret=secret, captcha_timeout_seconds=2.0),
        logging=LoggingSettings(log_level="WARNING", log_format="console"),
        sentry=SentrySettings(sentry_dsn=""),
    )


class TestCreateApp:
    def test_signup_route_registered(self):
        app = create_app(_settings())
        with TestClient(app) as client:
            resp = client.post("/signup", json={})
        assert resp.status_code == 400
        assert resp.json() == {"message": "recaptchaToken is required"}

    def test_lifespan_wires_configured_provider(self, mocker):
        seen_timeouts = []
        transport = _upstream({"success": True})

        def fake_http_client(timeout):
            seen_timeouts.append(timeout)
            return HttpClient(timeout=timeout, transport=transport)

        mocker.patch("app.HttpClient", side_effect=fake_http_client)
        app = create_app(_settings())
        with TestClient(app) as client:
            resp = client.post("/signup", json=VALID_BODY)
        assert resp.status_code == 201
        assert seen_timeouts == [2.0]

    def test_cors_preflight(self):
        app = create_app(_settings())
        with TestClient(app) as client:
            resp = client.options(
                "/signup",
                headers={
                    "Origin": "https://frontend.example",
                    "Access-Control-Request-Method": "POST",
                },
            )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] in ("*", "https://frontend.example")
