from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
import logging
import traceback

import groq
import requests

from .config import GatewayConfig
from .exceptions import ParseFailure, RemoteUnavailable

logger = logging.getLogger('inference_gateway')

class RemoteStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    PARSE_FAILURE = "parse_failure"

@dataclass(frozen=True)
class RemoteResult:
    """Outcome of one remote call: the value, or why there is none."""
    status: RemoteStatus
    value: Any = None
    reason: str = ""

    @classmethod
    def success(cls, value: Any) -> "RemoteResult":
        return cls(RemoteStatus.OK, value)

    @classmethod
    def unavailable(cls, reason: str) -> "RemoteResult":
        return cls(RemoteStatus.UNAVAILABLE, None, reason)

    @classmethod
    def parse_failure(cls, reason: str, value: Any = None) -> "RemoteResult":
        return cls(RemoteStatus.PARSE_FAILURE, value, reason)

    @property
    def ok(self) -> bool:
        return self.status is RemoteStatus.OK

    def unwrap(self) -> Any:
        if self.status is RemoteStatus.UNAVAILABLE:
            raise RemoteUnavailable(self.reason)
        if self.status is RemoteStatus.PARSE_FAILURE:
            raise ParseFailure(self.reason)
        return self.value

@dataclass(frozen=True)
class SentimentResult:
    label: str
    score: float

def normalize_generated_text(payload: Any) -> Optional[str]:
    """
    Pull generated text out of the response shapes text-generation endpoints use.

    Handles a bare string, {"generated_text": ...}, and a list whose first item is
    either of those or {"text": ...}. Returns None for anything else.
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        text = payload.get('generated_text')
        return text if isinstance(text, str) else None
    if isinstance(payload, list) and payload:
        first = payload[0]
        if isinstance(first, str):
            return first
        if isinstance(first, dict):
            for key in ('generated_text', 'text'):
                if isinstance(first.get(key), str):
                    return first[key]
    return None

def normalize_sentiment(payload: Any) -> Optional[SentimentResult]:
    """
    Normalize classifier output to a single label/score pair.

    Accepts {"label", "score"}, a list of those, or a nested list (one list of
    scored labels per input). The highest-scoring label wins.
    """
    candidates = payload
    if isinstance(candidates, dict):
        candidates = [candidates]
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], list):
        candidates = candidates[0]
    if not isinstance(candidates, list):
        return None

    best = None
    for item in candidates:
        if not isinstance(item, dict) or not isinstance(item.get('label'), str):
            continue
        try:
            score = float(item.get('score', 0.5))
        except (TypeError, ValueError):
            score = 0.5
        if best is None or score > best.score:
            best = SentimentResult(label=item['label'], score=score)
    return best

class InferenceGateway:
    """Timeout-bounded client for the remote text-generation and sentiment models."""

    def __init__(self, config: GatewayConfig, session: Optional[requests.Session] = None, groq_client: Any = None):
        self.config = config
        self.session = session or requests.Session()
        self.groq_client = groq_client

        if config.text_provider == "groq" and config.groq_api_key and self.groq_client is None:
            self.initialize_groq_client()

    def initialize_groq_client(self) -> None:
        """Build the Groq client with the gateway timeout and no automatic retries."""
        try:
            self.groq_client = groq.Groq(
                api_key=self.config.groq_api_key,
                timeout=self.config.timeout_seconds,
                max_retries=0
            )
            logger.info("Successfully initialized Groq client")
        except groq.GroqError as e:
            logger.error(f"Failed to initialize Groq client: {str(e)}")
            self.groq_client = None

    @property
    def text_model_available(self) -> bool:
        if self.config.text_provider == "groq":
            return self.groq_client is not None
        return self.config.text_model_enabled

    @property
    def sentiment_model_available(self) -> bool:
        return self.config.sentiment_model_enabled

    def _headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.config.hf_api_key}",
            'Content-Type': 'application/json'
        }

    def _post(self, model: str, body: Dict[str, Any]) -> RemoteResult:
        """POST to a hosted model and decode the JSON body."""
        url = f"{self.config.hf_base_url.rstrip('/')}/{model}"
        try:
            response = self.session.post(
                url,
                headers=self._headers(),
                json=body,
                timeout=self.config.timeout_seconds
            )
        except requests.Timeout:
            logger.warning(f"Request to {model} timed out after {self.config.timeout_seconds}s")
            return RemoteResult.unavailable("timeout")
        except requests.RequestException as e:
            logger.warning(f"Request to {model} failed: {str(e)}")
            return RemoteResult.unavailable(str(e))

        if not response.ok:
            logger.warning(f"{model} returned HTTP {response.status_code}")
            return RemoteResult.unavailable(f"HTTP {response.status_code}")

        try:
            return RemoteResult.success(response.json())
        except ValueError as e:
            logger.warning(f"{model} returned a malformed body: {str(e)}")
            return RemoteResult.unavailable("malformed body")

    def call_text_model(self, prompt: str, max_tokens: int = 400, temperature: float = 0.2) -> RemoteResult:
        """Generate text for a prompt. Never raises; failures come back as a tagged result."""
        if not self.text_model_available:
            return RemoteResult.unavailable("text model not configured")

        if self.config.text_provider == "groq":
            return self._call_groq(prompt, max_tokens, temperature)

        result = self._post(self.config.text_model, {
            'inputs': prompt,
            'parameters': {
                'max_new_tokens': max_tokens,
                'temperature': temperature,
                'return_full_text': False
            }
        })
        if not result.ok:
            return result

        text = normalize_generated_text(result.value)
        if text is None:
            logger.warning(f"Unrecognized text-generation response shape: {type(result.value).__name__}")
            return RemoteResult.parse_failure("unrecognized response shape", "")
        return RemoteResult.success(text)

    def _call_groq(self, prompt: str, max_tokens: int, temperature: float) -> RemoteResult:
        try:
            response = self.groq_client.chat.completions.create(
                messages=[{"role": "user", "content": prompt}],
                model=self.config.groq_model,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except groq.APITimeoutError:
            logger.warning("Groq request timed out")
            return RemoteResult.unavailable("timeout")
        except groq.APIError as e:
            logger.warning(f"Groq request failed: {str(e)}")
            logger.debug(f"Groq error details: {traceback.format_exc()}")
            return RemoteResult.unavailable(str(e))

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError):
            return RemoteResult.parse_failure("no completion choices", "")
        if not isinstance(content, str):
            return RemoteResult.parse_failure("empty completion", "")
        return RemoteResult.success(content)

    def call_sentiment_model(self, text: str) -> RemoteResult:
        """Classify the sentiment of a text. Unknown shapes degrade to neutral."""
        if not self.sentiment_model_available:
            return RemoteResult.unavailable("sentiment model not configured")

        result = self._post(self.config.sentiment_model, {'inputs': text})
        if not result.ok:
            return result

        sentiment = normalize_sentiment(result.value)
        if sentiment is None:
            logger.warning("Unrecognized sentiment response shape")
            return RemoteResult.parse_failure("unrecognized response shape", SentimentResult("neutral", 0.5))
        return RemoteResult.success(sentiment)
