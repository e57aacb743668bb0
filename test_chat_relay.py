#!/usr/bin/env python3
"""
Chat relay endpoint and the desktop client
"""

import os
import sys

import pytest
import requests
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from chat import relay_server
from chat.prompts import SYSTEM_PROMPT, build_user_prompt
from chat.relay_client import ChatRelayClient, ChatRelayError


SNAPSHOT = {'totalSqFt': 120.0, 'selectionsCount': 1,
            'selections': [{'type': 'rect', 'label': 'Kitchen', 'areaFt2': 120.0}]}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv('OPENAI_API_KEY', 'sk-test')
    monkeypatch.delenv('OPENAI_MODEL', raising=False)
    monkeypatch.delenv('OPENAI_BASE_URL', raising=False)
    return TestClient(relay_server.app)


class TestRelayServer:

    def test_reply_from_openai(self, client, monkeypatch):
        calls = []

        def fake_post(url, headers=None, json=None, timeout=None):
            calls.append({'url': url, 'headers': headers, 'json': json})
            return FakeResponse(payload={'output_text': "About 132 sq ft with 10% waste."})

        monkeypatch.setattr(relay_server.requests, 'post', fake_post)
        response = client.post("/api/chat", json={'message': "Add 10% waste", 'snapshot': SNAPSHOT})

        assert response.status_code == 200
        assert response.json() == {'reply': "About 132 sq ft with 10% waste."}
        call = calls[0]
        assert call['url'] == "https://api.openai.com/v1/responses"
        assert call['headers']['Authorization'] == "Bearer sk-test"
        assert call['json']['model'] == "gpt-4.1-mini"
        assert call['json']['input'][0] == {'role': 'system', 'content': SYSTEM_PROMPT}
        assert call['json']['input'][1]['content'] == build_user_prompt("Add 10% waste", SNAPSHOT)

    def test_model_and_base_url_from_environment(self, client, monkeypatch):
        monkeypatch.setenv('OPENAI_MODEL', 'gpt-test')
        monkeypatch.setenv('OPENAI_BASE_URL', 'http://localhost:9999/v1/')
        calls = []
        monkeypatch.setattr(relay_server.requests, 'post',
                            lambda url, **kwargs: calls.append((url, kwargs)) or FakeResponse(payload={}))

        response = client.post("/api/chat", json={'message': "hi"})
        assert response.json() == {'reply': relay_server.NO_REPLY}
        assert calls[0][0] == "http://localhost:9999/v1/responses"
        assert calls[0][1]['json']['model'] == 'gpt-test'

    @pytest.mark.parametrize("body", [{}, {'message': ""}, {'message': "   "}, {'snapshot': SNAPSHOT}])
    def test_missing_message(self, client, body):
        response = client.post("/api/chat", json=body)
        assert response.status_code == 400
        assert response.json() == {'error': 'Missing message'}

    def test_unreadable_body(self, client):
        response = client.post("/api/chat", content=b"not json",
                               headers={'Content-Type': 'application/json'})
        assert response.status_code == 400

    def test_missing_api_key(self, client, monkeypatch):
        monkeypatch.delenv('OPENAI_API_KEY')
        response = client.post("/api/chat", json={'message': "hi"})
        assert response.status_code == 500
        assert response.json() == {'error': 'Missing OPENAI_API_KEY environment variable'}

    def test_upstream_error_passes_details(self, client, monkeypatch):
        monkeypatch.setattr(relay_server.requests, 'post',
                            lambda *args, **kwargs: FakeResponse(429, text="quota exceeded"))
        response = client.post("/api/chat", json={'message': "hi"})
        assert response.status_code == 500
        assert response.json() == {'error': 'OpenAI request failed', 'details': "quota exceeded"}

    def test_upstream_unreachable(self, client, monkeypatch):
        def refuse(*args, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(relay_server.requests, 'post', refuse)
        response = client.post("/api/chat", json={'message': "hi"})
        assert response.status_code == 500
        assert response.json()['error'] == 'OpenAI request failed'

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_other_methods_rejected(self, client, method):
        response = getattr(client, method)("/api/chat")
        assert response.status_code == 405
        assert response.json() == {'error': 'Use POST'}

    def test_health(self, client):
        assert client.get("/health").json() == {'ok': True}


def test_extract_reply_from_output_items():
    data = {'output': [
        {'type': 'reasoning'},
        {'type': 'message', 'content': [{'type': 'output_text', 'text': "120 sq ft total."}]},
    ]}
    assert relay_server.extract_reply(data) == "120 sq ft total."
    assert relay_server.extract_reply({'output_text': ""}) == relay_server.NO_REPLY
    assert relay_server.extract_reply(None) == relay_server.NO_REPLY


@pytest.mark.parametrize("data", [
    {'output_text': 42},
    {'output': 7},
    {'output': [{'content': {'type': 'output_text'}}]},
    {'output': [{'content': [{'type': 'output_text', 'text': 99}]}]},
])
def test_extract_reply_ignores_non_text_output(data):
    assert relay_server.extract_reply(data) == relay_server.NO_REPLY


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({'url': url, 'json': json, 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return self.response


class TestRelayClient:
    URL = "http://127.0.0.1:8000/api/chat"

    def test_ask_sends_snapshot_copy(self):
        session = FakeSession(FakeResponse(payload={'reply': "Sure."}))
        client = ChatRelayClient(self.URL, session=session)
        assert client.ask("How much?", SNAPSHOT) == "Sure."

        sent = session.calls[0]
        assert sent['url'] == self.URL
        assert sent['json'] == {'message': "How much?", 'snapshot': SNAPSHOT}
        assert sent['json']['snapshot'] is not SNAPSHOT
        assert sent['timeout'] == 90

    @pytest.mark.parametrize("payload", [{}, {'reply': ""}, {'reply': "   "}, {'reply': 123},
                                         {'reply': ["a"]}, ["Sure."]])
    def test_missing_or_non_text_reply(self, payload):
        client = ChatRelayClient(self.URL, session=FakeSession(FakeResponse(payload=payload)))
        assert client.ask("hi", {}) == "No reply returned."

    def test_server_error_message(self):
        response = FakeResponse(500, payload={'error': 'Missing OPENAI_API_KEY environment variable'})
        client = ChatRelayClient(self.URL, session=FakeSession(response))
        with pytest.raises(ChatRelayError, match="Server error 500. Missing OPENAI_API_KEY"):
            client.ask("hi", {})

    def test_unreachable_relay(self):
        session = FakeSession(error=requests.ConnectionError("refused"))
        client = ChatRelayClient(self.URL, session=session)
        with pytest.raises(ChatRelayError, match="Could not reach the chat service"):
            client.ask("hi", {})

    def test_unreadable_reply(self):
        client = ChatRelayClient(self.URL, session=FakeSession(FakeResponse(200, text="<html>")))
        with pytest.raises(ChatRelayError):
            client.ask("hi", {})


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
