"""Tests for the CSRF gate and SessionCsrf."""

from __future__ import annotations

import logging

import pytest

from apcore_apiauth.auth.csrf import SessionCsrf, check_csrf, is_safe_method
from apcore_apiauth.auth.protocol import CsrfVerifier
from apcore_apiauth.errors import CsrfValidationError
from tests.conftest import FakeCsrf, FakeEnvironment


class TestIsSafeMethod:
    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS", "TRACE", "get"])
    def test_safe(self, method):
        assert is_safe_method(method) is True

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
    def test_mutating(self, method):
        assert is_safe_method(method) is False


class TestCheckCsrf:
    def test_safe_method_skips_verifier(self, make_request):
        verifier = FakeCsrf()
        assert check_csrf(make_request("GET"), verifier, "api", FakeEnvironment()) is True
        assert verifier.calls == []

    def test_missing_header_denied(self, make_request):
        verifier = FakeCsrf()
        assert check_csrf(make_request("POST"), verifier, "api", FakeEnvironment()) is False
        assert verifier.calls == []

    def test_missing_header_allowed_in_test_mode(self, make_request):
        assert check_csrf(make_request("POST"), FakeCsrf(), "api", FakeEnvironment(testing=True)) is True

    def test_missing_header_without_verifier_denied_in_test_mode(self, make_request):
        assert check_csrf(make_request("POST"), None, "api", FakeEnvironment(testing=True)) is False

    def test_correct_token(self, make_request):
        verifier = FakeCsrf(token="good")
        request = make_request("POST", headers={"X-API-CSRF": "good"})
        assert check_csrf(request, verifier, "api", FakeEnvironment()) is True
        assert verifier.calls == [("good", "api")]

    def test_wrong_token(self, make_request):
        request = make_request("DELETE", headers={"X-API-CSRF": "bad"})
        assert check_csrf(request, FakeCsrf(token="good"), "api", FakeEnvironment()) is False

    def test_wrong_token_denied_even_in_test_mode(self, make_request):
        request = make_request("PUT", headers={"X-API-CSRF": "bad"})
        assert check_csrf(request, FakeCsrf(token="good"), "api", FakeEnvironment(testing=True)) is False

    def test_token_from_other_namespace_denied(self, make_request):
        request = make_request("POST", headers={"X-API-CSRF": "good"})
        assert check_csrf(request, FakeCsrf(token="good", namespace="login"), "api", FakeEnvironment()) is False

    def test_no_verifier_denied(self, make_request):
        request = make_request("POST", headers={"X-API-CSRF": "good"})
        assert check_csrf(request, None, "api", FakeEnvironment()) is False

    def test_unexpected_verifier_error_propagates(self, make_request):
        class BrokenCsrf:
            def verify(self, token: str, namespace: str) -> None:
                raise RuntimeError("session backend down")

        request = make_request("POST", headers={"X-API-CSRF": "good"})
        with pytest.raises(RuntimeError, match="session backend down"):
            check_csrf(request, BrokenCsrf(), "api", FakeEnvironment())

    def test_denial_reason_logged_without_token(self, make_request, caplog: pytest.LogCaptureFixture):
        request = make_request("POST", headers={"X-API-CSRF": "leaky-value"})
        with caplog.at_level(logging.DEBUG, logger="apcore_apiauth.auth.csrf"):
            check_csrf(request, FakeCsrf(token="good"), "api", FakeEnvironment())
        assert any("token mismatch" in r.getMessage() for r in caplog.records)
        assert not any("leaky-value" in r.getMessage() for r in caplog.records)


class TestSessionCsrf:
    def test_implements_verifier_protocol(self):
        assert isinstance(SessionCsrf({}), CsrfVerifier)

    def test_generated_token_verifies(self):
        data: dict = {}
        csrf = SessionCsrf(data)
        token = csrf.generate("api")
        csrf.verify(token, "api")
        assert data["csrf"] == {"api": token}

    def test_generate_is_stable_per_namespace(self):
        csrf = SessionCsrf({})
        assert csrf.generate("api") == csrf.generate("api")
        assert csrf.generate("api") != csrf.generate("login")

    def test_namespaces_are_isolated(self):
        csrf = SessionCsrf({})
        login_token = csrf.generate("login")
        csrf.generate("api")
        with pytest.raises(CsrfValidationError, match="token mismatch"):
            csrf.verify(login_token, "api")

    def test_no_stored_token(self):
        with pytest.raises(CsrfValidationError, match="no token stored"):
            SessionCsrf({}).verify("anything", "api")

    def test_empty_token(self):
        csrf = SessionCsrf({})
        csrf.generate("api")
        with pytest.raises(CsrfValidationError, match="no token supplied"):
            csrf.verify("", "api")

    def test_error_carries_namespace(self):
        with pytest.raises(CsrfValidationError) as exc_info:
            SessionCsrf({}).verify("x", "api")
        assert exc_info.value.namespace == "api"

    def test_from_request(self, make_request):
        assert SessionCsrf.from_request(make_request()) is None
        assert SessionCsrf.from_request(make_request(session={})) is not None
