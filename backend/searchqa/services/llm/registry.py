"""
Model Registry

Maps model IDs to their metadata and provider types.
Used by the orchestrator and the answer services to select the correct
provider per pipeline stage (rephrase, answer, follow-up).
"""

from searchqa.services.llm.base import LLMProvider


# ── Model Registry ────────────────────────────────────────────────────────────
# Each entry maps a model_id (as used in settings) to:
#   - display_name: Human-readable name
#   - provider:     Which LLMProvider class to use
#   - api_model:    The actual model string sent to the provider API
#   - supports_streaming: Whether the answer streamer may use it
#   - tier:         Pricing tier for display

MODEL_REGISTRY: dict[str, dict] = {
    "gpt-3.5-turbo": {
        "display_name": "GPT-3.5 Turbo",
        "provider": "openai_chat",
        "api_model": "gpt-3.5-turbo",
        "supports_streaming": True,
        "tier": "budget",
        "description": "Fast and cheap. Default for query rephrasing and answer streaming.",
    },
    "gpt-4": {
        "display_name": "GPT-4",
        "provider": "openai_chat",
        "api_model": "gpt-4",
        "supports_streaming": True,
        "tier": "premium",
        "description": "Most reliable at following the follow-up question JSON format.",
    },
    "gpt-4o": {
        "display_name": "GPT-4o",
        "provider": "openai_chat",
        "api_model": "gpt-4o",
        "supports_streaming": True,
        "tier": "standard",
        "description": "Balanced quality and latency for grounded answers.",
    },
    "gpt-4o-mini": {
        "display_name": "GPT-4o Mini",
        "provider": "openai_chat",
        "api_model": "gpt-4o-mini",
        "supports_streaming": True,
        "tier": "budget",
        "description": "Cheapest GPT-4 class model. Good enough for rephrasing.",
    },
}


# ── Provider Factory ──────────────────────────────────────────────────────────

# Provider class registry (lazy-loaded singletons)
_provider_instances: dict[str, LLMProvider] = {}


def _create_provider(provider_type: str) -> LLMProvider:
    """Create a provider instance by type string."""
    if provider_type == "openai_chat":
        from searchqa.services.llm.openai_chat import OpenAIChatProvider
        return OpenAIChatProvider()
    else:
        raise ValueError(f"Unknown provider type: {provider_type}")


def get_provider(model_id: str) -> tuple[LLMProvider, str]:
    """
    Get the provider instance and API model name for a given model_id.

    Args:
        model_id: The model identifier (e.g., "gpt-4")

    Returns:
        Tuple of (provider_instance, api_model_name)

    Raises:
        ValueError: If the model_id is not in the registry
    """
    if model_id not in MODEL_REGISTRY:
        raise ValueError(
            f"Unknown model: {model_id}. "
            f"Available models: {', '.join(MODEL_REGISTRY.keys())}"
        )

    model_info = MODEL_REGISTRY[model_id]
    provider_type = model_info["provider"]

    # Lazy singleton creation
    if provider_type not in _provider_instances:
        _provider_instances[provider_type] = _create_provider(provider_type)

    return _provider_instances[provider_type], model_info["api_model"]


def list_models() -> list[dict]:
    """
    Return the list of available completion models.

    Returns:
        List of dicts with id, display_name, tier, supports_streaming, description
    """
    return [
        {
            "id": model_id,
            "display_name": info["display_name"],
            "tier": info["tier"],
            "supports_streaming": info["supports_streaming"],
            "description": info.get("description", ""),
        }
        for model_id, info in MODEL_REGISTRY.items()
    ]
