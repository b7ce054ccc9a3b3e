"""
CTC Estimator

Turns a fetched GitHub profile plus the caller's experience bracket and
target role into a CTC estimate using Gemini.

The model is asked for strict JSON but is not trusted to deliver it:
the response goes through parse_ctc_response(), a pure function that
returns Parsed or Malformed. The estimator itself never raises. Any
failure is replaced by one of two fixed fallback estimates:

- UPSTREAM_FAILURE_ESTIMATE: the model could not be built or the call raised
  (missing key, network, quota)
- PARSE_FAILURE_ESTIMATE: the call succeeded but the response could not be
  parsed or validated

No retries: the first failure is terminal for that request.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from src.common.json_utils import parse_llm_json
from src.common.llm_factory import create_estimation_llm
from src.common.types import (
    ESTIMATE_SOURCE_PARSE_FALLBACK,
    ESTIMATE_SOURCE_UPSTREAM_FALLBACK,
    CTCEstimate,
    GitHubProfileData,
)
from src.services.github_profile_service import account_age_years
from src.services.prompts.ctc_prompts import build_ctc_prompt

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0

UPSTREAM_FAILURE_ESTIMATE = CTCEstimate(
    ctc="₹4,00,000 – ₹10,00,000",
    message=(
        "Technical difficulties prevented a proper analysis. This is a conservative "
        "estimate based on your experience bracket. Get your profile analyzed again "
        "for accurate numbers."
    ),
    confidence=30,
    source=ESTIMATE_SOURCE_UPSTREAM_FALLBACK,
)

PARSE_FAILURE_ESTIMATE = CTCEstimate(
    ctc="₹6,00,000 – ₹12,00,000",
    message=(
        "Analysis system hiccup, but let's be real - this estimate is based on limited "
        "data. Your actual worth depends heavily on interview performance and company "
        "budget. Don't take this as gospel."
    ),
    confidence=45,
    source=ESTIMATE_SOURCE_PARSE_FALLBACK,
)


@dataclass(frozen=True)
class Parsed:
    """Model response that passed extraction and validation."""
    value: CTCEstimate


@dataclass(frozen=True)
class Malformed:
    """Model response that could not be turned into an estimate."""
    reason: str


ParseResult = Union[Parsed, Malformed]


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 100]."""
    # Compare before converting: float() overflows on very large ints
    if value <= MIN_CONFIDENCE:
        return MIN_CONFIDENCE
    if value >= MAX_CONFIDENCE:
        return MAX_CONFIDENCE
    return float(value)


def parse_ctc_response(text: str) -> ParseResult:
    """
    Extract and validate a CTC estimate from raw model output.

    Steps: trim, strip code fences (labeled or not), re-trim, take the first
    "{" through the last "}", parse, require non-empty string "ctc" and
    "message" plus a numeric "confidence", clamp confidence into [0, 100].

    Args:
        text: Raw model response

    Returns:
        Parsed(CTCEstimate) or Malformed(reason)
    """
    try:
        data = parse_llm_json(text or "")
    except ValueError as e:
        return Malformed(str(e))

    ctc = data.get("ctc")
    message = data.get("message")
    confidence = data.get("confidence")

    if not isinstance(ctc, str) or not ctc.strip():
        return Malformed("missing or empty 'ctc'")
    if not isinstance(message, str) or not message.strip():
        return Malformed("missing or empty 'message'")
    # bool is an int subclass; "true" is not a confidence
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        return Malformed("missing or non-numeric 'confidence'")
    if confidence != confidence:  # NaN
        return Malformed("'confidence' is NaN")

    return Parsed(CTCEstimate(ctc=ctc, message=message, confidence=clamp_confidence(confidence)))


def _response_text(response: Any) -> str:
    """Flatten a chat model response into plain text."""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


class CTCEstimator:
    """
    Estimate generator.

    The chat model is built lazily through llm_factory so a missing API key
    surfaces as an upstream failure on the first estimate rather than at
    construction.
    """

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        llm_factory: Callable[[], BaseChatModel] = create_estimation_llm,
    ):
        self._llm = llm
        self._llm_factory = llm_factory

    def _get_llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self._llm_factory()
        return self._llm

    def _invoke(self, prompt: str) -> str:
        llm = self._get_llm()
        response = llm.invoke([HumanMessage(content=prompt)])
        return _response_text(response)

    def estimate(
        self,
        profile: GitHubProfileData,
        years_of_experience: str,
        target_role: str,
    ) -> CTCEstimate:
        """
        Produce a CTC estimate. Never raises.

        Args:
            profile: Fetched GitHub profile with aggregate stats
            years_of_experience: Experience bracket chosen by the caller
            target_role: Target role chosen by the caller

        Returns:
            The model's estimate, or one of the two fixed fallbacks
        """
        username = profile.user.login
        try:
            prompt = build_ctc_prompt(
                profile,
                years_of_experience,
                target_role,
                account_age_years=(
                    account_age_years(profile.user.created_at) if profile.user.created_at else 0
                ),
            )
            raw = self._invoke(prompt)
        except Exception as e:
            logger.error(f"CTC estimation call failed for {username}: {e}")
            return UPSTREAM_FAILURE_ESTIMATE

        result = parse_ctc_response(raw)
        if isinstance(result, Malformed):
            logger.warning(
                f"Unusable CTC response for {username} ({result.reason}); "
                f"response starts: {raw[:200]!r}"
            )
            return PARSE_FAILURE_ESTIMATE

        logger.info(
            f"CTC estimate for {username}: {result.value.ctc} "
            f"(confidence {result.value.confidence:.0f})"
        )
        return result.value
