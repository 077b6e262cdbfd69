import json
import time

import httpx

from ouramind.providers.base import BaseClassifierProvider


class WatsonProvider(BaseClassifierProvider):
    """Provider for IBM Watson Natural Language Understanding (emotion feature)."""

    def __init__(
        self,
        api_key: str,
        service_url: str,
        version: str = "2022-04-07",
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.endpoint = service_url.rstrip("/") + "/v1/analyze"
        self.version = version
        self._transport = transport

    @property
    def name(self) -> str:
        return "watson"

    def analyze(self, text: str, timeout: float) -> dict:
        # httpx timeouts apply per connect/read step; `timeout` bounds the whole call
        deadline = time.monotonic() + timeout
        try:
            body = {
                "text": text,
                "features": {"emotion": {}},
            }

            # IAM API keys are accepted as basic auth with the literal user "apikey"
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                with client.stream(
                    "POST",
                    self.endpoint,
                    params={"version": self.version},
                    auth=("apikey", self.api_key),
                    json=body,
                ) as response:
                    response.raise_for_status()
                    chunks = []
                    for chunk in response.iter_bytes():
                        if time.monotonic() > deadline:
                            raise httpx.ReadTimeout(
                                f"No complete response within {timeout}s", request=response.request
                            )
                        chunks.append(chunk)
            data = json.loads(b"".join(chunks))

            emotions = (
                data.get("emotion", {}).get("document", {}).get("emotion")
                if isinstance(data, dict) else None
            )
            if not isinstance(emotions, dict):
                return {
                    "emotions": None,
                    "provider": self.name,
                    "status": "failed",
                    "error": "Response has no document emotion block",
                }

            return {
                "emotions": emotions,
                "provider": self.name,
                "status": "success",
                "error": None,
            }
        except httpx.TimeoutException:
            return {
                "emotions": None,
                "provider": self.name,
                "status": "failed",
                "error": "Timeout",
            }
        except httpx.HTTPStatusError as e:
            return {
                "emotions": None,
                "provider": self.name,
                "status": "failed",
                "error": f"HTTP {e.response.status_code}",
            }
        except (httpx.HTTPError, ValueError) as e:
            return {
                "emotions": None,
                "provider": self.name,
                "status": "failed",
                "error": str(e),
            }
