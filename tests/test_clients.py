"""Tests for the analysis webhook client.

Uses respx to mock httpx transport-layer calls, verifying:
- The posted payload and returned status
- Errors on non-2xx answers and unreachable hosts
- Refusal when no webhook URL is configured
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from brandlens.clients.analysis import AnalysisWebhookClient
from brandlens.errors import AnalysisTriggerError

WEBHOOK_URL = "https://hooks.example.com/analysis"


class TestAnalysisWebhookClient:
    def test_unconfigured_client_is_unavailable(self) -> None:
        client = AnalysisWebhookClient(webhook_url="")
        assert client.is_available is False
        with pytest.raises(AnalysisTriggerError, match="not configured"):
            client.trigger("p-1", ["ChatGPT"])

    @respx.mock
    def test_trigger_posts_project_and_models(self) -> None:
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(200, text="queued"))

        client = AnalysisWebhookClient(webhook_url=WEBHOOK_URL)
        result = client.trigger("p-1", ["ChatGPT", "Claude"])

        assert route.called
        sent = json.loads(route.calls.last.request.content)
        assert sent == {"project_id": "p-1", "models": ["ChatGPT", "Claude"]}
        assert result["status_code"] == 200
        assert result["body"] == "queued"
        assert result["models"] == ["ChatGPT", "Claude"]

    @respx.mock
    def test_http_500_raises(self) -> None:
        respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(500))

        client = AnalysisWebhookClient(webhook_url=WEBHOOK_URL)
        with pytest.raises(AnalysisTriggerError, match="HTTP 500"):
            client.trigger("p-1", [])

    @respx.mock
    def test_connection_error_raises(self) -> None:
        respx.post(WEBHOOK_URL).mock(side_effect=httpx.ConnectError("refused"))

        client = AnalysisWebhookClient(webhook_url=WEBHOOK_URL)
        with pytest.raises(AnalysisTriggerError, match="request failed"):
            client.trigger("p-1", ["ChatGPT"])
