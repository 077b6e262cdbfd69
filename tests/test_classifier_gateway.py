"""
Tests for the classifier boundary.

Tests:
- Provider results normalized to the catalog, in catalog order
- Provider failures, exceptions and bad payloads become ClassificationFailed
- Watson request shape and error mapping via httpx.MockTransport
"""

import json
import time

import httpx
import pytest

from ouramind.errors import ClassificationFailed, ValidationFailed
from ouramind.providers.watson_provider import WatsonProvider
from ouramind.services.classifier_gateway import ClassifierGateway

from conftest import FakeProvider

WATSON_BODY = {
    "emotion": {
        "document": {
            "emotion": {"sadness": 0.52, "joy": 0.11, "fear": 0.05, "disgust": 0.02, "anger": 0.3}
        }
    }
}


class TestGateway:
    def test_returns_catalog_scores_in_catalog_order(self, provider, gateway):
        provider.push(joy=0.9, sadness=0.5)
        scores = gateway.classify("a good day")
        assert list(scores) == ["joy", "sadness", "anger", "fear", "disgust"]
        assert scores["joy"] == 0.9

    def test_passes_timeout_to_provider(self, provider, gateway):
        gateway.classify("text")
        assert provider.calls == [("text", 2.0)]

    def test_failed_status_raises(self, provider, gateway):
        provider.fail_with = "Timeout"
        with pytest.raises(ClassificationFailed):
            gateway.classify("text")

    def test_provider_exception_is_wrapped(self, gateway, provider):
        def boom(text, timeout):
            raise RuntimeError("socket closed")
        provider.analyze = boom
        with pytest.raises(ClassificationFailed) as exc:
            gateway.classify("text")
        assert isinstance(exc.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("emotions", [
        None,
        {"joy": 0.5},
        {"joy": "high", "sadness": 0.1, "anger": 0.1, "fear": 0.1, "disgust": 0.1},
        {"joy": 1.2, "sadness": 0.1, "anger": 0.1, "fear": 0.1, "disgust": 0.1},
        {"joy": -0.1, "sadness": 0.1, "anger": 0.1, "fear": 0.1, "disgust": 0.1},
        {"joy": True, "sadness": 0.1, "anger": 0.1, "fear": 0.1, "disgust": 0.1},
    ])
    def test_bad_payloads_never_become_zeros(self, emotions):
        p = FakeProvider()
        p.analyze = lambda text, timeout: {"emotions": emotions, "status": "success", "provider": "fake"}
        with pytest.raises(ClassificationFailed):
            ClassifierGateway(p).classify("text")

    def test_extra_emotions_are_dropped(self):
        p = FakeProvider(default={"joy": 0.4, "sadness": 0.1, "anger": 0.1,
                                  "fear": 0.1, "disgust": 0.1, "surprise": 0.9})
        assert "surprise" not in ClassifierGateway(p).classify("text")

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_rejected(self, gateway, text):
        with pytest.raises(ValidationFailed):
            gateway.classify(text)


class TestWatsonProvider:
    def test_posts_emotion_feature_request(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=WATSON_BODY)

        provider = WatsonProvider("secret", "https://nlu.example.com/instances/1/",
                                  transport=httpx.MockTransport(handler))
        result = provider.analyze("I miss them", timeout=3)

        assert result["status"] == "success"
        assert result["emotions"]["sadness"] == 0.52
        assert seen["url"] == "https://nlu.example.com/instances/1/v1/analyze?version=2022-04-07"
        assert seen["auth"].startswith("Basic ")
        assert seen["body"] == {"text": "I miss them", "features": {"emotion": {}}}

    def test_http_error_reported_as_failed(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(503, json={"error": "down"}))
        result = WatsonProvider("k", "https://nlu.example.com", transport=transport).analyze("x", 1)
        assert result["status"] == "failed"
        assert result["error"] == "HTTP 503"

    def test_timeout_reported_as_failed(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        result = WatsonProvider("k", "https://nlu.example.com",
                                transport=httpx.MockTransport(handler)).analyze("x", 1)
        assert result == {"emotions": None, "provider": "watson", "status": "failed", "error": "Timeout"}

    def test_slow_drip_body_bounded_by_overall_timeout(self):
        payload = json.dumps(WATSON_BODY).encode()

        def drip():
            for i in range(0, len(payload), 16):
                time.sleep(0.2)
                yield payload[i:i + 16]

        transport = httpx.MockTransport(lambda r: httpx.Response(200, content=drip()))
        started = time.monotonic()
        result = WatsonProvider("k", "https://nlu.example.com", transport=transport).analyze("x", 0.3)

        assert result["error"] == "Timeout"
        assert time.monotonic() - started < 1.5

    def test_chunked_body_within_timeout_succeeds(self):
        payload = json.dumps(WATSON_BODY).encode()
        chunks = [payload[i:i + 8] for i in range(0, len(payload), 8)]
        transport = httpx.MockTransport(lambda r: httpx.Response(200, content=iter(chunks)))
        result = WatsonProvider("k", "https://nlu.example.com", transport=transport).analyze("x", 5)
        assert result["status"] == "success"
        assert result["emotions"]["anger"] == 0.3

    def test_missing_emotion_block_reported_as_failed(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"usage": {}}))
        result = WatsonProvider("k", "https://nlu.example.com", transport=transport).analyze("x", 1)
        assert result["status"] == "failed"

    def test_gateway_over_watson_timeout_raises_classification_failed(self):
        def handler(request):
            raise httpx.ConnectTimeout("no route", request=request)

        provider = WatsonProvider("k", "https://nlu.example.com", transport=httpx.MockTransport(handler))
        with pytest.raises(ClassificationFailed):
            ClassifierGateway(provider, timeout=0.5).classify("text")

    def test_gateway_over_watson_success(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=WATSON_BODY))
        provider = WatsonProvider("k", "https://nlu.example.com", transport=transport)
        scores = ClassifierGateway(provider).classify("text")
        assert scores == {"joy": 0.11, "sadness": 0.52, "anger": 0.3, "fear": 0.05, "disgust": 0.02}
