"""Tests for the Flask endpoints"""

from unittest import mock

import pytest
import requests

import app as app_module
from data_provider import LiveDataProvider, TokenError


def make_live_provider(token=None, token_error=None):
    session = mock.Mock(spec=requests.Session)
    response = mock.Mock(ok=True, status_code=200, text='{"state": "CA"}')
    session.get.return_value = response

    token_manager = mock.Mock()
    if token_error:
        token_manager.get_token.side_effect = token_error
    else:
        token_manager.get_token.return_value = token

    return LiveDataProvider(session=session, token_manager=token_manager,
                            api_base="https://api.test", exchange_base="https://exchange.test")


def test_root_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_ping(client):
    response = client.get("/ping")
    assert response.status_code == 200
    assert response.get_json()["pong"] is True


def test_health_reports_environment_without_secrets(client):
    body = client.get("/health").get_json()
    environment = body["environment"]
    assert set(environment) >= {"hasClientId", "hasClientSecret", "tokenUrl", "apiBase", "dataProvider"}
    assert isinstance(environment["hasClientSecret"], bool)


@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": "   "}, {"conversationHistory": []}])
def test_chat_requires_message(client, payload):
    response = client.post("/api/chat", json=payload)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Message is required"}


def test_chat_without_json_body(client):
    response = client.post("/api/chat", data="not json", content_type="text/plain")
    assert response.status_code == 400


def test_chat_loan_limits(client):
    response = client.post("/api/chat", json={"message": "What are the loan limits in CA?", "conversationHistory": []})
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["queryType"] == "loan_limits"
    assert body["data"]["state"] == "CA"
    assert "Conforming Loan Limits for CA" in body["content"]


def test_chat_accepts_alternate_message_field(client):
    body = client.post("/api/chat", json={"query": "Get SRP pricing"}).get_json()
    assert body["queryType"] == "srp_pricing"
    assert body["data"]["commitmentOptions"]


def test_chat_greeting_returns_menu(client):
    body = client.post("/api/chat", json={"message": "hello"}).get_json()
    assert body["success"] is True
    assert body["queryType"] == "general"
    assert body["data"] is None
    assert body["content"].startswith("# Welcome to RTLMAC")


def test_chat_clarification(client):
    body = client.post("/api/chat", json={"message": "Get DU messages"}).get_json()
    assert body["queryType"] == "du_messages"
    assert body["data"] is None
    assert "Casefile ID" in body["content"]


def test_chat_unexpected_error_returns_500(client, monkeypatch):
    def explode(message, history=None, provider=None):
        raise RuntimeError("classifier exploded")

    monkeypatch.setattr(app_module, "handle_query", explode)
    response = client.post("/api/chat", json={"message": "What are the loan limits in CA?"})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to process request", "details": "classifier exploded"}


def test_unknown_route_returns_json_404(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    body = response.get_json()
    assert body["success"] is False
    assert "POST /api/chat" in body["available_endpoints"]


def test_connection_check_without_token(client, monkeypatch):
    provider = make_live_provider(token_error=TokenError("Client credentials are not configured"))
    monkeypatch.setattr(app_module, "get_data_provider", lambda kind=None: provider)

    response = client.get("/api/test-connection")
    tests = response.get_json()["tests"]

    assert response.status_code == 200
    assert tests["oauth"] == {"success": False, "error": "Client credentials are not configured"}
    assert tests["publicApi"]["success"] is True
    assert tests["publicApi"]["status"] == 200
    assert "authenticatedApi" not in tests
    provider.session.get.assert_called_once()
    assert provider.session.get.call_args[0][0] == "https://exchange.test/v1/loan-limits?state=CA"


def test_connection_check_with_token(client, monkeypatch):
    provider = make_live_provider(token="abcdefghijklmnopqrstuvwxyz")
    monkeypatch.setattr(app_module, "get_data_provider", lambda kind=None: provider)

    tests = client.get("/api/test-connection").get_json()["tests"]

    assert tests["oauth"] == {"success": True, "tokenPreview": "abcdefghijklmnopqrst..."}
    assert tests["authenticatedApi"]["success"] is True
    urls = [call[0][0] for call in provider.session.get.call_args_list]
    assert urls == [
        "https://exchange.test/v1/loan-limits?state=CA",
        "https://api.test/v1/construction-spending/section?section=Total",
    ]
