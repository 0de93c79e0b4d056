"""
Text generation providers.

The pipeline only depends on ``GenerationProvider.generate_content``; which
model or gateway answers is a configuration concern.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import openai
from langchain_core.messages import HumanMessage, SystemMessage

from app.core.config import settings
from app.core.exceptions import ServiceError, ServiceErrorKind, ServiceTimeoutError
from app.core.llm_config import LLMFactory
from app.core.agents.quiz.prompts import QUIZ_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class GenerationProvider(ABC):
    """A service that turns a prompt into text."""

    @abstractmethod
    async def generate_content(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            ServiceError: On any provider failure
        """


class LangChainGenerationProvider(GenerationProvider):
    """
    Generation provider backed by a LangChain chat model.

    Requests are spaced at least ``min_request_interval`` seconds apart and
    bounded by ``timeout`` seconds each.
    """

    def __init__(
        self,
        llm=None,
        timeout: Optional[float] = None,
        min_request_interval: Optional[float] = None,
    ):
        self.llm = llm or LLMFactory.create_llm(tracing_project="quiz-generation")
        self.timeout = settings.LLM_TIMEOUT_SECONDS if timeout is None else timeout
        self.min_request_interval = (
            settings.LLM_MIN_REQUEST_INTERVAL if min_request_interval is None else min_request_interval
        )
        self._throttle_lock = asyncio.Lock()
        self._last_request_at: Optional[float] = None

    async def generate_content(self, prompt: str) -> str:
        await self._throttle()

        messages = [
            SystemMessage(content=QUIZ_SYSTEM_PROMPT),
            HumanMessage(content=prompt)
        ]

        try:
            logger.info("Sending prompt to generation provider...")
            response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Generation provider timed out after {self.timeout}s")
            raise ServiceTimeoutError() from e
        except openai.APIError as e:
            error = self._map_api_error(e)
            logger.error(f"Generation provider error ({error.kind.value}): {e}")
            raise error from e

        content = response.content if isinstance(response.content, str) else str(response.content or "")
        if not content.strip():
            raise ServiceError(ServiceErrorKind.EMPTY_RESPONSE)

        logger.info(f"Provider response received, length: {len(content)}")
        return content

    async def _throttle(self) -> None:
        async with self._throttle_lock:
            loop = asyncio.get_running_loop()
            if self._last_request_at is not None:
                wait = self.min_request_interval - (loop.time() - self._last_request_at)
                if wait > 0:
                    logger.info(f"Rate limiting: waiting {wait:.2f}s")
                    await asyncio.sleep(wait)
            self._last_request_at = loop.time()

    @staticmethod
    def _map_api_error(error: openai.APIError) -> ServiceError:
        """Translate an OpenAI client error into the provider error taxonomy."""
        if isinstance(error, openai.APITimeoutError):
            return ServiceTimeoutError()
        if isinstance(error, openai.RateLimitError):
            return ServiceError(ServiceErrorKind.RATE_LIMITED)
        if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return ServiceError(ServiceErrorKind.AUTH_INVALID)
        if isinstance(error, openai.APIResponseValidationError):
            return ServiceError(ServiceErrorKind.MALFORMED_RESPONSE, "AI service returned invalid response format.")
        if isinstance(error, openai.BadRequestError):
            return ServiceError(ServiceErrorKind.BAD_REQUEST)
        if isinstance(error, openai.APIStatusError) and error.status_code < 500:
            return ServiceError(ServiceErrorKind.BAD_REQUEST)
        # 5xx responses and connection failures
        return ServiceError(ServiceErrorKind.SERVER_OVERLOAD)
