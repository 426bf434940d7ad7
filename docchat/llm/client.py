import httpx
from docchat.errors import UpstreamError


class LLMClient:
    """OpenAI-compatible chat-completions endpoint. One attempt per call."""

    def __init__(self, base_url: str, api_key: str | None, model: str,
                 timeout: float = 30, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.transport = transport

    async def _request(self, method: str, path: str, json: dict) -> dict:
        if not self.api_key:
            raise UpstreamError("LLM API key is not configured")
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.request(method, url, headers=headers, json=json)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"status={e.response.status_code} body={e.response.text[:2000]}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"invalid JSON from upstream: {e}") from e

    async def chat_completions(self, messages: list[dict], temperature: float = 0,
                               max_tokens: int = 512) -> dict:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        return await self._request("POST", "/chat/completions", payload)
