"""
Ollama client wrappers.

This module provides the three models the assistant talks to (chat,
embeddings, vision) plus helpers around the raw Ollama API for pulling
models and reading their metadata. Clients are cached to avoid creating
multiple connections.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

import ollama
from langchain_ollama import ChatOllama, OllamaEmbeddings
from src.config.settings import get_settings


# Suffixes of the architecture-specific keys in Ollama's model_info
EXTRA_INFO_KEYS = {
    ".languages": "Languages",
    ".context_length": "Context length",
    ".embedding_length": "Embedding length",
}


@dataclass
class PullProgress:
    """One progress update while pulling a model."""

    status: str
    total: int
    completed: int

    @property
    def percent(self) -> float:
        if not self.total:
            return 0.0
        return self.completed * 100.0 / self.total


@lru_cache(maxsize=1)
def get_llm(temperature: Optional[float] = None) -> ChatOllama:
    """
    Get the Ollama chat model (cached).

    Args:
        temperature: Sampling temperature, defaults to the configured one

    Returns:
        ChatOllama: Configured Ollama chat model

    Example:
        >>> llm = get_llm()
        >>> response = llm.invoke("Hello, how are you?")
    """
    settings = get_settings()

    return ChatOllama(
        model=settings.ollama_model,
        temperature=settings.ollama_temperature if temperature is None else temperature,
        base_url=settings.ollama_base_url,
    )


@lru_cache(maxsize=1)
def get_vision_llm() -> ChatOllama:
    """Get the vision-capable chat model used to describe images (cached)."""
    settings = get_settings()

    return ChatOllama(
        model=settings.ollama_vision_model,
        temperature=settings.ollama_temperature,
        base_url=settings.ollama_base_url,
    )


@lru_cache(maxsize=1)
def get_embeddings() -> OllamaEmbeddings:
    """Get the Ollama embedding model (cached)."""
    settings = get_settings()

    return OllamaEmbeddings(
        model=settings.ollama_embedding_model,
        base_url=settings.ollama_base_url,
    )


@lru_cache(maxsize=1)
def get_ollama_client() -> ollama.Client:
    """Get the raw Ollama API client, used for pull/show."""
    return ollama.Client(host=get_settings().ollama_base_url)


def pull_model(
    model: str,
    on_progress: Optional[Callable[[PullProgress], None]] = None,
    client: Optional[ollama.Client] = None,
) -> None:
    """
    Download a model into the local Ollama runtime if needed.

    Ollama answers immediately with "success" when the model is already
    present, so this is safe to call on every start.

    Args:
        model: Model name, e.g. "llama3.2"
        on_progress: Called for every progress update
        client: Ollama client, defaults to the cached one
    """
    client = client or get_ollama_client()

    for update in client.pull(model, stream=True):
        if on_progress is None:
            continue
        on_progress(PullProgress(
            status=update.status or "",
            total=update.total or 0,
            completed=update.completed or 0,
        ))


def get_model_info(model: str, client: Optional[ollama.Client] = None) -> dict[str, str]:
    """
    Read display information about a local model.

    Returns:
        dict: Ordered label -> value pairs (architecture, parameters,
              quantization and the architecture-specific extras)
    """
    client = client or get_ollama_client()
    response = client.show(model)

    model_info = dict(response.modelinfo or {})
    details = response.details

    info = {
        "Architecture": str(model_info.get("general.architecture", "")),
        "Parameters": _format_count(model_info.get("general.parameter_count")),
        "Quantization": str(details.quantization_level if details else ""),
    }

    for suffix, label in EXTRA_INFO_KEYS.items():
        key = next((k for k in model_info if k.endswith(suffix)), None)
        if key is not None:
            value = model_info[key]
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(v) for v in value)
            info[label] = str(value)

    return info


def _format_count(value) -> str:
    if isinstance(value, int):
        return f"{value:,}"
    return "" if value is None else str(value)
