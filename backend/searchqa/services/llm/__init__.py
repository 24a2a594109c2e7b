"""
LLM Provider Abstraction Layer

Provides a unified interface for completion providers with a model
registry and shared orchestration logic (JSON parsing, retries, streaming).
"""

from searchqa.services.llm.orchestrator import LLMOrchestrator, get_orchestrator
from searchqa.services.llm.registry import MODEL_REGISTRY, get_provider, list_models
from searchqa.services.llm.models import FollowUpQuestions

__all__ = [
    "LLMOrchestrator",
    "get_orchestrator",
    "MODEL_REGISTRY",
    "get_provider",
    "list_models",
    "FollowUpQuestions",
]
