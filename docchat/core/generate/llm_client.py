import logging
import httpx
from typing import List, Dict, Any, Optional
from docchat.core.generate.base import CompletionService
from docchat.config.settings import settings

logger = logging.getLogger(__name__)

class LLMClient(CompletionService):
    """
    Client for any OpenAI-compatible chat completions endpoint
    (Gemini's OpenAI endpoint by default).
    One attempt per call: failures are reported to the caller, never retried.
    """

    def __init__(self, api_key: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.config = settings.llm
        self.base_url = f"{self.config.base_url.rstrip('/')}/chat/completions"
        self.headers = {
            "Authorization": f"Bearer {self.api_key}" if self.api_key else "",
            "Content-Type": "application/json"
        }
        self._http_client = http_client

    def complete(self, system_instruction: str, user_query: str) -> str:
        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": user_query}
        ]
        return self.generate(messages)

    def generate(self, messages: List[Dict[str, str]]) -> str:
        payload = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature
        }

        if not self.api_key:
            logger.warning("LLM_API_KEY is not set. LLM calls will fail.")

        if self._http_client is not None:
            return self._post(self._http_client, payload)
        with httpx.Client(timeout=self.config.timeout) as client:
            return self._post(client, payload)

    def _post(self, client: httpx.Client, payload: Dict[str, Any]) -> str:
        response = client.post(self.base_url, headers=self.headers, json=payload)
        response.raise_for_status()
        data = response.json()
        content = data["choices"][0]["message"]["content"]
        if content is None:
            raise ValueError(f"Model {payload['model']} returned an empty message")
        return content
