import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger('config')

DEFAULT_CONFIG_PATH = Path("config/interview.yaml")
MIN_TIMEOUT_SECONDS = 1.0
MAX_TIMEOUT_SECONDS = 30.0

class GatewayConfig(BaseModel):
    """Remote inference settings. Keys come from the environment, never from YAML."""
    model_config = ConfigDict(frozen=True)

    text_provider: Literal["huggingface", "groq", "none"] = "huggingface"
    hf_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    hf_base_url: str = "https://router.huggingface.co/models"
    text_model: str = "meta-llama/Llama-3.2-3B-Instruct"
    groq_model: str = "llama-3.1-8b-instant"
    sentiment_model: str = "cardiffnlp/twitter-roberta-base-sentiment-latest"
    sentiment_enabled: bool = False
    timeout_seconds: float = Field(9.0, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS)

    @property
    def text_model_enabled(self) -> bool:
        if self.text_provider == "huggingface":
            return bool(self.hf_api_key)
        if self.text_provider == "groq":
            return bool(self.groq_api_key)
        return False

    @property
    def sentiment_model_enabled(self) -> bool:
        return self.sentiment_enabled and bool(self.hf_api_key)

class PipelineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    resume_parser: Literal["auto", "llm", "local"] = "auto"
    min_resume_chars: int = Field(50, ge=0)
    parallel_question_generation: bool = False
    max_workers: int = Field(3, ge=1)
    speaking_rate_wpm: int = Field(130, ge=1)

    @property
    def remote_extraction_enabled(self) -> bool:
        return self.resume_parser != "local" and self.gateway.text_model_enabled

def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load tunables from YAML, falling back to defaults when the file is absent."""
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file {path} not found, using defaults")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse config file {path}: {str(e)}")
        return {}

def _timeout_from_env(value: Optional[str]) -> Optional[float]:
    """INFERENCE_TIMEOUT as seconds, or None when unset or unusable."""
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning(f"Ignoring INFERENCE_TIMEOUT={value!r}: not a number")
        return None
    if not MIN_TIMEOUT_SECONDS <= timeout <= MAX_TIMEOUT_SECONDS:
        logger.warning(
            f"Ignoring INFERENCE_TIMEOUT={value!r}: must be between "
            f"{MIN_TIMEOUT_SECONDS:g} and {MAX_TIMEOUT_SECONDS:g} seconds"
        )
        return None
    return timeout

def load_config(path: Union[str, Path, None] = DEFAULT_CONFIG_PATH) -> PipelineConfig:
    """
    Build the pipeline configuration.

    YAML supplies tunables; environment variables (optionally from a .env file)
    supply API keys and override the service selection.
    """
    load_dotenv(override=False)

    data = _load_yaml(Path(path)) if path else {}
    gateway_data = dict(data.pop('gateway', None) or {})

    # Secrets are only read from the environment
    gateway_data.pop('hf_api_key', None)
    gateway_data.pop('groq_api_key', None)
    gateway_data['hf_api_key'] = os.getenv('HF_API_KEY') or None
    gateway_data['groq_api_key'] = os.getenv('GROQ_API_KEY') or None

    ai_service = os.getenv('AI_SERVICE')
    if ai_service:
        # AI_SERVICE=huggingface also turns on sentiment scoring
        if ai_service == 'huggingface':
            gateway_data['sentiment_enabled'] = True
        if ai_service in ('huggingface', 'groq'):
            gateway_data['text_provider'] = ai_service
        elif ai_service == 'local':
            gateway_data['text_provider'] = 'none'

    timeout = _timeout_from_env(os.getenv('INFERENCE_TIMEOUT'))
    if timeout is not None:
        gateway_data['timeout_seconds'] = timeout

    resume_parser = os.getenv('RESUME_PARSER')
    if resume_parser:
        data['resume_parser'] = resume_parser

    config = PipelineConfig(gateway=GatewayConfig(**gateway_data), **data)

    if config.gateway.text_model_enabled:
        logger.info(f"Text model enabled via {config.gateway.text_provider}")
    else:
        logger.warning("No text model configured - using local parsing and question templates only")
    if config.gateway.sentiment_model_enabled:
        logger.info(f"Sentiment model enabled: {config.gateway.sentiment_model}")

    return config
