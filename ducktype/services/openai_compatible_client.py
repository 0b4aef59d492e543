import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_ROOT / ".env", override=False)


# Raised when generation cannot be attempted at all (unknown provider or missing credential)
class GenerationUnavailableError(RuntimeError):
    pass


_PROVIDER_CFG: Dict[str, Dict[str, Optional[str]]] = {
    "gemini": {"env": "GEMINI_API_KEY", "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/"},
    "openai": {"env": "OPENAI_API_KEY", "base_url": None},
}


# Create an async OpenAI-compatible client for the configured generation provider
def get_async_openai_compatible_client(provider: Optional[str]) -> AsyncOpenAI:
    provider_l = (provider or "gemini").strip().lower()
    cfg = _PROVIDER_CFG.get(provider_l)
    if cfg is None:
        raise GenerationUnavailableError(f"Unsupported provider: {provider_l}")

    env_var = cfg["env"]
    api_key = os.getenv(env_var)
    if not api_key:
        raise GenerationUnavailableError(f"Missing {env_var}")

    # Retries are owned by the fallback policy, not the HTTP client
    kwargs = {"api_key": api_key, "max_retries": 0}
    if cfg["base_url"]:
        kwargs["base_url"] = cfg["base_url"]
    return AsyncOpenAI(**kwargs)
