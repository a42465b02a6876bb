import pytest
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interview_ai.config import GatewayConfig, PipelineConfig
from interview_ai.gateway import RemoteResult, SentimentResult
from interview_ai.schemas import Project

class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self.payload = payload
        self.bad_json = bad_json

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload

class FakeSession:
    """Stands in for requests.Session; records every POST."""
    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({'url': url, 'headers': headers, 'json': json, 'timeout': timeout})
        if self.exc:
            raise self.exc
        return self.response

class FakeGateway:
    """Gateway double with scripted text and sentiment results."""
    def __init__(self, text=None, sentiment=None, text_available=True, sentiment_available=False, raises=None):
        self.text = text
        self.sentiment = sentiment
        self._text_available = text_available
        self._sentiment_available = sentiment_available
        self.raises = raises
        self.text_calls = []
        self.sentiment_calls = []

    @property
    def text_model_available(self):
        return self._text_available

    @property
    def sentiment_model_available(self):
        return self._sentiment_available

    def call_text_model(self, prompt, max_tokens=400, temperature=0.2):
        self.text_calls.append(prompt)
        if self.raises:
            raise self.raises
        if self.text is None:
            return RemoteResult.unavailable("timeout")
        if callable(self.text):
            return RemoteResult.success(self.text(prompt))
        return RemoteResult.success(self.text)

    def call_sentiment_model(self, text):
        self.sentiment_calls.append(text)
        if self.sentiment is None:
            return RemoteResult.unavailable("HTTP 503")
        return RemoteResult.success(SentimentResult(*self.sentiment))

@pytest.fixture
def fake_session():
    return FakeSession

@pytest.fixture
def fake_response():
    return FakeResponse

@pytest.fixture
def failing_gateway():
    """Text model configured but every call times out"""
    return FakeGateway(text=None)

@pytest.fixture
def gateway_factory():
    return FakeGateway

@pytest.fixture
def local_config():
    return PipelineConfig(gateway=GatewayConfig(text_provider="none"))

@pytest.fixture
def hf_config():
    return GatewayConfig(
        text_provider="huggingface",
        hf_api_key="hf_test",
        sentiment_enabled=True,
        timeout_seconds=9.0
    )

@pytest.fixture
def sample_resume():
    """Minimal resume with one project bullet"""
    return (
        "Jane Doe\n"
        "jane.doe@example.com | github.com/janedoe\n"
        "\n"
        "PROJECTS\n"
        "• TaskFlow: a collaborative task tracker built with React and Node.js for small teams\n"
        "\n"
        "EDUCATION\n"
        "B.Tech in Computer Science, State University, 2021\n"
    )

@pytest.fixture
def sample_projects():
    return [
        Project(
            title="TaskFlow",
            description="A collaborative task tracker built with React and Node.js for small teams.",
            technologies=["react", "node", "mongodb"],
            achievements=["Built real-time sync for shared boards"]
        ),
        Project(
            title="Price Watcher",
            description="Scraper service that tracks product prices and sends alerts through a REST API.",
            technologies=["python", "flask", "redis", "docker"]
        ),
        Project(
            title="Fleet Monitor",
            description="Telemetry pipeline for delivery vans with dashboards and anomaly alerts.",
            technologies=["kafka", "spark", "grafana"]
        ),
        Project(
            title="Recipe Box",
            description="Mobile-first recipe manager with offline support and sharing.",
            technologies=["vue", "firebase"]
        ),
    ]
