"""
LLM Factory Module.

Provides the factory for the estimation chat model. Callers should use
this instead of instantiating ChatGoogleGenerativeAI directly so model,
temperature, timeout and JSON output mode stay consistent.

Usage:
    from src.common.llm_factory import create_estimation_llm

    llm = create_estimation_llm()
    response = llm.invoke([HumanMessage(content=prompt)])
"""

import logging
from typing import Any, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from src.common.config import Config

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"


def create_estimation_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    api_key: Optional[str] = None,
    **kwargs: Any,
) -> BaseChatModel:
    """
    Create the Gemini chat model used for CTC estimation.

    Structured (JSON-typed) output is requested, but callers must still
    tolerate prose or code fences around the object.

    Args:
        model: Model name (defaults to Config.GEMINI_MODEL)
        temperature: Sampling temperature (defaults to Config.CTC_TEMPERATURE)
        api_key: API key (defaults to Config.GEMINI_API_KEY)
        **kwargs: Additional ChatGoogleGenerativeAI parameters

    Returns:
        Configured chat model

    Raises:
        ValueError: If no Gemini API key is configured
    """
    effective_key = api_key or Config.get_llm_api_key()
    if not effective_key:
        raise ValueError("Gemini API key not configured (set GEMINI_API_KEY)")

    effective_model = model or Config.GEMINI_MODEL
    effective_temperature = temperature if temperature is not None else Config.CTC_TEMPERATURE

    llm = ChatGoogleGenerativeAI(
        model=effective_model,
        google_api_key=effective_key,
        temperature=effective_temperature,
        response_mime_type=JSON_MIME_TYPE,
        timeout=Config.LLM_TIMEOUT_SECONDS,
        # Single attempt; the estimator falls back instead of retrying
        max_retries=1,
        **kwargs,
    )

    logger.debug(
        f"Created estimation LLM: model={effective_model}, temperature={effective_temperature}"
    )
    return llm
