"""Prompt and style enhancement I/O models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from aimusic_studio.core.models.domain import EnhancementMethod, EnhancementType


class PromptEnhanceRequest(BaseModel):
    prompt: str = Field(default="", description="Prompt to enhance; must not be blank")
    style: str = Field(default="")
    target_language: str = Field(default="russian")
    enhancement_type: EnhancementType = Field(default=EnhancementType.complete)


class PromptEnhancement(BaseModel):
    """Result of a prompt enhancement, whichever method produced it."""

    enhanced_prompt: str
    music_style: str = ""
    suggested_lyrics: str = ""
    structural_tags: str = ""
    method: EnhancementMethod
    tokens_used: int = 0


class StyleEnhanceRequest(BaseModel):
    content: str = Field(min_length=1)


class StyleEnhancement(BaseModel):
    enhanced_style: str
    original_content: str
    method: EnhancementMethod
    provider_response: Optional[dict] = None
