"""Tests for the API key authentication gate."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from image_api.core.security import APIKeyMiddleware, is_authorized


def _gated_app(header_name: str = "x-api-token", api_key: str = "secret") -> FastAPI:
    app = FastAPI()
    app.add_middleware(APIKeyMiddleware, header_name=header_name, api_key=api_key)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    return app


class TestIsAuthorized:
    def test_matching_key(self) -> None:
        assert is_authorized("secret", "secret") is True

    @pytest.mark.parametrize("presented", [None, "", "Secret", "secret ", "wrong"])
    def test_mismatch(self, presented) -> None:
        assert is_authorized(presented, "secret") is False

    @pytest.mark.parametrize("presented", [None, ""])
    def test_empty_secret_authorizes_nothing(self, presented) -> None:
        assert is_authorized(presented, "") is False

    def test_non_ascii_key_as_received_from_http(self) -> None:
        """UTF-8 header bytes arrive latin-1 decoded and still match the secret."""
        received = "clé-secrète".encode("utf-8").decode("latin-1")
        assert is_authorized(received, "clé-secrète") is True

    def test_value_outside_latin1_is_rejected(self) -> None:
        assert is_authorized("ключ", "ключ") is False


class TestAPIKeyMiddleware:
    def test_passes_through_with_key(self) -> None:
        client = TestClient(_gated_app())

        response = client.get("/ping", headers={"x-api-token": "secret"})

        assert response.status_code == 200
        assert response.json() == {"pong": True}

    def test_rejects_missing_header(self) -> None:
        client = TestClient(_gated_app())

        response = client.get("/ping")

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_header_name_is_configurable(self) -> None:
        client = TestClient(_gated_app(header_name="X-API-Key"))

        assert client.get("/ping", headers={"x-api-token": "secret"}).status_code == 401
        assert client.get("/ping", headers={"X-API-Key": "secret"}).status_code == 200

    def test_header_name_is_case_insensitive(self) -> None:
        client = TestClient(_gated_app())

        assert client.get("/ping", headers={"X-Api-Token": "secret"}).status_code == 200

    def test_unconfigured_key_rejects_everything(self) -> None:
        client = TestClient(_gated_app(api_key=""))

        assert client.get("/ping").status_code == 401
        assert client.get("/ping", headers={"x-api-token": ""}).status_code == 401

    def test_unknown_route_is_gated(self) -> None:
        client = TestClient(_gated_app())

        assert client.get("/missing").status_code == 401

    def test_non_ascii_key_over_http(self) -> None:
        client = TestClient(_gated_app(api_key="clé-secrète"))

        response = client.get("/ping", headers={"x-api-token": "clé-secrète".encode("utf-8")})

        assert response.status_code == 200
