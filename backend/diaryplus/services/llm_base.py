"""
DiaryPlus Backend — Abstract LLM Service Interface
====================================================

What:  Contract for the AI provider behind weekly review and investor update
       summaries.
How:   Concrete providers (GeminiService) implement summarize() and
       health_check(); SummaryService only talks to this interface, so tests
       swap in a mock without touching the Gemini SDK.
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract text-summarization provider.

    Contract:
        - summarize() returns markdown text, never None
        - Provider errors are wrapped in LLMServiceError
        - CircuitBreakerOpenError is raised without contacting the provider
          while the circuit is open
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials are present and calls may be attempted."""
        ...

    @abstractmethod
    async def summarize(self, system_prompt: str, user_prompt: str) -> str:
        """
        Generate markdown from a system instruction and the user's material.

        Raises:
            LLMServiceError: The provider failed after all retries.
            CircuitBreakerOpenError: Too many recent failures.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight reachability check used by GET /health."""
        ...
