"""Unit tests for ApiClient.

Covers:
- Bearer and correlation headers.
- Error bodies turned into RemoteError messages.
- Transport failures and 401 handling.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from modules.core.exceptions import GENERIC_REMOTE_MESSAGE, RemoteError
from modules.core.http import REQUEST_ID_HEADER, ApiClient

pytestmark = pytest.mark.unit


def _response(status_code=200, payload=None, content=b"{}"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.content = content
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture()
def http():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture()
def client(http, session):
    return ApiClient("http://api.test/", session=session, timeout=3.0, http=http)


class TestRequest:
    def test_returns_decoded_json(self, client, http):
        http.request.return_value = _response(payload=[{"id": 1}])

        assert client.get("list_produtos", "/produtos/") == [{"id": 1}]

    def test_sends_auth_and_correlation_headers(self, client, http):
        http.request.return_value = _response(payload={})

        client.get("list_produtos", "/produtos/", params={"search": "cola"})

        args, kwargs = http.request.call_args
        assert args == ("GET", "http://api.test/produtos/")
        assert kwargs["headers"]["Authorization"] == "Bearer tok-123"
        assert kwargs["headers"][REQUEST_ID_HEADER]
        assert kwargs["timeout"] == 3.0
        assert kwargs["params"] == {"search": "cola"}

    def test_blank_params_dropped(self, client, http):
        http.request.return_value = _response(payload=[])

        client.get("list_pedidos", "/pedidos/", params={"search": " ", "status_filter": None, "limit": 10})

        assert http.request.call_args.kwargs["params"] == {"limit": 10}

    def test_no_token_no_authorization(self, http):
        http.request.return_value = _response(payload={})
        client = ApiClient("http://api.test", http=http)

        client.get("fetch", "/x")

        assert "Authorization" not in http.request.call_args.kwargs["headers"]

    def test_empty_body_is_none(self, client, http):
        http.request.return_value = _response(status_code=204, content=b"")

        assert client.delete("delete_venda", "/vendas/1") is None


class TestErrors:
    def test_detail_list_joined(self, client, http):
        http.request.return_value = _response(
            status_code=422,
            payload={"detail": [{"msg": "Campo obrigatório"}, {"msg": "Valor inválido"}]},
        )

        with pytest.raises(RemoteError) as exc_info:
            client.post("create_venda", "/vendas/", json={})

        error = exc_info.value
        assert error.message == "Campo obrigatório, Valor inválido"
        assert error.status_code == 422
        assert error.operation == "create_venda"

    def test_detail_string(self, client, http):
        http.request.return_value = _response(status_code=400, payload={"detail": "Estoque insuficiente"})

        with pytest.raises(RemoteError, match="Estoque insuficiente"):
            client.post("create_pedido", "/pedidos/", json={})

    def test_non_json_body_uses_fallback(self, client, http):
        http.request.return_value = _response(status_code=500, payload=ValueError("no json"), content=b"<html>")

        with pytest.raises(RemoteError) as exc_info:
            client.get("get_pedido", "/pedidos/1", fallback="Falha ao carregar pedido 1.")

        assert exc_info.value.message == "Falha ao carregar pedido 1."

    def test_transport_failure(self, client, http):
        http.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(RemoteError) as exc_info:
            client.get("list_produtos", "/produtos/")

        assert exc_info.value.message == GENERIC_REMOTE_MESSAGE
        assert exc_info.value.status_code is None

    def test_401_clears_session(self, client, http, session):
        http.request.return_value = _response(status_code=401, payload={"detail": "Not authenticated"})

        with pytest.raises(RemoteError):
            client.get("list_vendas", "/vendas/")

        assert session.token is None
        assert not session.is_authenticated
