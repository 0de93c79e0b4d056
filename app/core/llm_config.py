import os
from typing import Optional
from langchain_openai import ChatOpenAI
from pydantic import SecretStr
from app.core.config import settings

class LLMFactory:
    """Factory for creating configured LLM instances with tracing."""

    @staticmethod
    def create_llm(
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        tracing_project: Optional[str] = None,
        api_key: Optional[str] = None
    ) -> ChatOpenAI:
        """
        Create a configured ChatOpenAI instance.

        Any OpenAI-compatible gateway can be targeted through ``base_url``.

        Args:
            model: The model name to use (defaults to settings).
            base_url: Alternative API base URL (defaults to settings).
            temperature: The temperature for generation.
            max_tokens: Upper bound on completion tokens.
            timeout: Client-side request timeout in seconds.
            tracing_project: The LangSmith project name for tracing.
            api_key: OpenAI API key (optional, defaults to settings).
        """
        # Set env vars for tracing if provided
        if settings.LANGSMITH_TRACING:
            os.environ["LANGCHAIN_TRACING_V2"] = "true"
            os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
            os.environ["LANGCHAIN_API_KEY"] = settings.LANGSMITH_API_KEY
            os.environ["LANGCHAIN_PROJECT"] = tracing_project or settings.LANGSMITH_PROJECT

        return ChatOpenAI(
            model=model or settings.LLM_MODEL,
            api_key=SecretStr(api_key or settings.OPENAI_API_KEY),
            base_url=base_url or settings.LLM_BASE_URL or None,
            temperature=settings.LLM_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or settings.LLM_MAX_TOKENS,
            timeout=timeout or settings.LLM_TIMEOUT_SECONDS,
            # No client-side retries; callers decide whether to retry
            max_retries=0,
        )
