"""Gemini generateContent client for calorie estimation."""

from dataclasses import dataclass

import httpx

from calorie_tracker.services.estimation import EstimationClient


@dataclass
class HttpxGeminiEstimationClient(EstimationClient):
    """HTTPX-backed Gemini client."""

    api_key: str
    model: str
    base_url: str
    http_client: httpx.AsyncClient
    temperature: float = 0.1

    @classmethod
    def create(
        cls, api_key: str, model: str, base_url: str
    ) -> "HttpxGeminiEstimationClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def complete(self, *, prompt: str, schema: dict[str, object]) -> str:
        """Generate content and return the first candidate's text."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.temperature,
                    "responseMimeType": "application/json",
                },
            },
            timeout=30,
        )
        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise
        error = payload.get("error") if isinstance(payload, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else error
            raise RuntimeError(f"Gemini error: {message}")
        response.raise_for_status()
        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError("Gemini returned no candidates") from exc
        if not text:
            raise RuntimeError("Gemini returned an empty response")
        return text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
