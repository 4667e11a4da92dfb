"""
Prompt Enhancement API Endpoints.

Two ways of improving what the user typed before generation:

- ``/enhance`` rewrites a prompt with the LLM (or a local template when the
  LLM is unavailable);
- ``/style`` enriches a style description through Suno, with a local
  fallback when Suno fails.
"""

from fastapi import APIRouter, HTTPException, status

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.io import (
    PromptEnhancement,
    PromptEnhanceRequest,
    StyleEnhancement,
    StyleEnhanceRequest,
)
from aimusic_studio.server.services.deps import CurrentUser, EnhancerDep, ProvidersDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/enhance",
    response_model=PromptEnhancement,
    summary="Enhance Prompt",
    description="Turn a short prompt into a detailed music production brief.",
    responses={400: {"description": "Prompt is blank"}},
)
async def enhance_prompt(request: PromptEnhanceRequest, enhancer: EnhancerDep) -> PromptEnhancement:
    """
    Enhance a generation prompt.

    - **prompt**: The prompt to enhance (required).
    - **style**: Style context.
    - **target_language**: Language of the answer (default ``russian``).
    - **enhancement_type**: ``style``, ``lyrics``, ``structure`` or ``complete``.

    The ``method`` field of the answer tells whether the LLM (``openai``) or
    the local template (``fallback``) produced it.
    """
    if not request.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")

    result = await enhancer.enhance(
        request.prompt,
        request.style,
        request.target_language,
        request.enhancement_type,
    )
    logger.info(f"Prompt enhanced via {result.method.value} ({result.tokens_used} tokens)")
    return result


@router.post(
    "/style",
    response_model=StyleEnhancement,
    summary="Enhance Style",
    description="Enrich a style description through Suno, locally when Suno is unavailable.",
)
async def enhance_style(
    request: StyleEnhanceRequest,
    user: CurrentUser,
    enhancer: EnhancerDep,
    providers: ProvidersDep,
) -> StyleEnhancement:
    logger.debug(f"Style enhancement requested by user {user.id}")
    return await enhancer.enhance_style(request.content, providers.suno)
