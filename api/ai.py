"""
AI proxy route. Forwards submitted code to the configured LLM for review.

Route prefix: /ai
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_settings
from api.errors import AppError, UpstreamError
from config.settings import Settings
from utils.llm_providers import BaseLLMProvider, get_llm_provider
from utils.validators import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])

REVIEW_SYSTEM_PROMPT = """\
You are a senior code reviewer. Review the code you are given and reply in
Markdown with:
1. A short summary of what the code does.
2. Bugs, edge cases and security problems, most severe first.
3. Concrete suggestions, with corrected snippets where useful.
Keep the review focused and do not restate the whole input."""


class ReviewRequest(BaseModel):
    code: Optional[str] = None


def require_code(req: ReviewRequest) -> str:
    require_fields("Code is required", req.code)
    return req.code


def get_review_provider(settings: Settings = Depends(get_settings)) -> BaseLLMProvider:
    return get_llm_provider(
        settings.llm_provider,
        api_key=settings.llm_api_key(),
        default_model=settings.llm_model,
    )


@router.post("/get-review")
async def get_review(
    code: str = Depends(require_code),
    settings: Settings = Depends(get_settings),
    provider: BaseLLMProvider = Depends(get_review_provider),
) -> Dict[str, Any]:
    """The code is checked before the provider is resolved."""
    try:
        review = await provider.generate(
            code,
            system=REVIEW_SYSTEM_PROMPT,
            temperature=settings.llm_temperature,
        )
    except AppError:
        raise
    except Exception as exc:
        logger.error("LLM review request failed: %s", exc)
        raise UpstreamError("AI service request failed") from exc

    return {"success": True, "review": review}
