"""
Prompts for the CTC estimation step.

- ctc_prompts: profile block, evaluation rubric, salary bands and output schema
"""

from src.services.prompts.ctc_prompts import (
    CTC_OUTPUT_SCHEMA,
    SALARY_BANDS,
    build_ctc_prompt,
)

__all__ = [
    "CTC_OUTPUT_SCHEMA",
    "SALARY_BANDS",
    "build_ctc_prompt",
]
