"""
Tests unitaires taxonomie d'erreurs
"""

import pytest

from authcore.errors import (
    AppError,
    AuthError,
    ConfigInvalidError,
    CredentialExpiredError,
    CredentialInvalidError,
    CredentialMissingError,
    CredentialStoreError,
    ForbiddenError,
    RateLimitedError,
    UnauthorizedError,
    serialize_error,
)


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        "error_class,code,status_code",
        [
            (ConfigInvalidError, "VALIDATION_ERROR", 500),
            (CredentialMissingError, "TOKEN_MISSING", 401),
            (CredentialExpiredError, "TOKEN_EXPIRED", 401),
            (CredentialInvalidError, "TOKEN_INVALID", 401),
            (UnauthorizedError, "UNAUTHORIZED", 401),
            (ForbiddenError, "FORBIDDEN", 403),
            (RateLimitedError, "RATE_LIMITED", 429),
            (CredentialStoreError, "STORE_ERROR", 500),
        ],
    )
    def test_codes(self, error_class, code, status_code):
        error = error_class()

        assert isinstance(error, AppError)
        assert error.code == code
        assert error.status_code == status_code

    def test_credential_errors_are_auth_errors(self):
        for error_class in (CredentialMissingError, CredentialExpiredError, CredentialInvalidError):
            assert issubclass(error_class, AuthError)

    def test_message_defaults_to_code(self):
        assert str(CredentialInvalidError()) == "TOKEN_INVALID"

    def test_overrides(self):
        error = AppError("boom", code="CUSTOM", status_code=418, metadata={"k": "v"})

        assert error.to_dict() == {
            "name": "AppError",
            "code": "CUSTOM",
            "message": "boom",
            "status_code": 418,
            "metadata": {"k": "v"},
        }

    def test_override_does_not_leak_to_class(self):
        AppError(code="CUSTOM")

        assert AppError().code == "INTERNAL_ERROR"

    def test_repr(self):
        assert repr(CredentialExpiredError("Token expired")) == (
            "CredentialExpiredError(code='TOKEN_EXPIRED', message='Token expired')"
        )

    def test_rate_limited_without_retry_after(self):
        assert "metadata" not in RateLimitedError().to_dict()


class TestSerializeError:
    def test_app_error(self):
        result = serialize_error(ForbiddenError("Missing permissions", metadata={"missing": ["a"]}))

        assert result["code"] == "FORBIDDEN"
        assert result["metadata"] == {"missing": ["a"]}
        assert "stack" not in result

    def test_unknown_error_is_generic(self):
        result = serialize_error(KeyError("internal detail"))

        assert result == {
            "name": "InternalError",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "status_code": 500,
        }

    def test_include_stack(self):
        try:
            raise CredentialInvalidError("Invalid token")
        except CredentialInvalidError as e:
            result = serialize_error(e, include_stack=True)

        assert "CredentialInvalidError" in result["stack"]
        assert "test_include_stack" in result["stack"]
