"""
Unit tests for the CORS and access log helpers.
"""

import json

import pytest

from bookstore.api.middleware.cors import DEV_ORIGINS, allowed_origins
from bookstore.api.middleware.logging import (
    LoggingConfig,
    describe_body,
    redact_sensitive_data,
)


class TestAllowedOrigins:

    @pytest.mark.parametrize("environment", ["development", "test"])
    def test_dev_origins_outside_production(self, environment):
        assert allowed_origins(environment) == list(DEV_ORIGINS)

    def test_production_only_allows_configured_origins(self):
        origins = allowed_origins("production", ["https://shop.example.com"])

        assert origins == ["https://shop.example.com"]

    def test_extras_are_appended_once(self):
        origins = allowed_origins(
            "development",
            ["https://shop.example.com", "http://localhost:3000", "https://shop.example.com"],
        )

        assert origins == list(DEV_ORIGINS) + ["https://shop.example.com"]


class TestRedaction:

    def test_nested_credentials(self):
        data = {
            "email": "reader@bookstore.io",
            "Password": "secret123",
            "user": {"hashed_password": "$2b$12$abc", "name": "Reader"},
            "sessions": [{"access_token": "eyJ..."}],
        }

        redacted = redact_sensitive_data(data, LoggingConfig().redacted_fields)

        assert redacted == {
            "email": "reader@bookstore.io",
            "Password": "[REDACTED]",
            "user": {"hashed_password": "[REDACTED]", "name": "Reader"},
            "sessions": [{"access_token": "[REDACTED]"}],
        }

    def test_scalars_pass_through(self):
        assert redact_sensitive_data(42, {"password"}) == 42


class TestDescribeBody:

    def test_compact_and_redacted(self):
        body = json.dumps({"email": "a@b.io", "password": "secret123"}).encode()

        assert describe_body(body, LoggingConfig()) == '{"email":"a@b.io","password":"[REDACTED]"}'

    def test_empty_body(self):
        assert describe_body(b"", LoggingConfig()) is None

    def test_oversized_body(self):
        config = LoggingConfig(max_body_log_size=10)

        assert describe_body(b'{"title": "A long title"}', config) == "<25 bytes>"

    def test_non_json_body(self):
        assert describe_body(b"title=Dune", LoggingConfig()) == "<non-JSON body>"
