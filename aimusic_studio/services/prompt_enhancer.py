"""
Prompt and style enhancement.

``PromptEnhancer`` turns a short user prompt into a production brief. With an
OpenAI key it asks the LLM (through a pydantic-ai ``Agent``); when the key is
missing or the LLM call fails it falls back to a local template that adds a
style phrase, three instruments typical for the style and a production note.

Style enhancement goes to Suno's style endpoint first and falls back to
appending two enhancement phrases locally.
"""

from __future__ import annotations

import random
import re
from typing import TYPE_CHECKING, Optional, Union

from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.core.models.domain import EnhancementMethod, EnhancementType
from aimusic_studio.core.models.io.prompts import PromptEnhancement, StyleEnhancement
from aimusic_studio.providers import ProviderError, SunoClient

if TYPE_CHECKING:
    from aimusic_studio.server.core.config import Settings

logger = get_logger(__name__)

SYSTEM_PROMPTS = {
    EnhancementType.style: (
        "You are a music production expert. Transform the user's basic prompt into a detailed, professional "
        "music style description. Focus on instrumentation, production techniques, sound design, and musical "
        "arrangements. Respond in {language}."
    ),
    EnhancementType.lyrics: (
        "You are a professional songwriter. Create compelling lyrics based on the user's prompt. Include proper "
        "song structure with [Verse], [Chorus], [Bridge] tags. Make it emotional and memorable. Respond in {language}."
    ),
    EnhancementType.structure: (
        "You are a music structure expert. Analyze the prompt and suggest the optimal song structure with timing "
        "and arrangement details. Include BPM, key suggestions, and instrumental breakdown. Respond in {language}."
    ),
    EnhancementType.complete: (
        "You are a comprehensive music AI assistant. Transform the user's prompt into:\n"
        "1. Enhanced style description with technical details\n"
        "2. Suggested song structure and arrangement\n"
        "3. Production notes and instrumentation\n"
        "4. Brief lyrical theme suggestions\n"
        "Start the relevant lines with 'Style:', 'Lyrics:' and 'Structure:'. "
        "Provide a professional, detailed music production brief. Respond in {language}."
    ),
}

STYLE_PHRASES = (
    "with a rich layered arrangement and a professional studio sound",
    "with cinematic scope and orchestral elements",
    "with modern production and spatial effects",
    "with deep bass, a tight rhythm section and dynamic transitions",
    "with atmospheric pads, reverb and an emotional delivery",
    "with a memorable melodic hook and harmonious chords",
    "with virtuoso solo parts and technically polished performance",
    "with experimental sound textures and an innovative approach",
)

PRODUCTION_PHRASES = (
    "wide stereo image",
    "multiband compression and limiting",
    "professional mastering for streaming platforms",
    "live acoustics with natural reverb",
    "analog warmth combined with digital precision",
    "dynamic range with contrasting sections",
)

STYLE_INSTRUMENTS = {
    "pop": ("synthesizers", "electric piano", "bass guitar", "drums", "string sections"),
    "rock": ("electric guitars", "bass guitar", "powerful drums", "synthesizers", "choir"),
    "electronic": ("analog synthesizers", "drum machines", "samples", "FM synthesis", "modular systems"),
    "classical": ("string orchestra", "wind instruments", "grand piano", "harp", "timpani"),
    "jazz": ("saxophone", "piano", "double bass", "drums", "trumpet", "trombone"),
    "ambient": ("synth pads", "field recordings", "delay effects", "modular system"),
}

STRUCTURES = {
    "pop": "[Intro] [Verse 1] [Pre-Chorus] [Chorus] [Verse 2] [Chorus] [Bridge] [Final Chorus] [Outro]",
    "rock": "[Intro] [Verse 1] [Chorus] [Verse 2] [Chorus] [Guitar Solo] [Bridge] [Final Chorus] [Outro]",
    "electronic": "[Intro] [Build-up] [Drop] [Breakdown] [Build-up] [Drop] [Bridge] [Final Drop] [Outro]",
    "ballad": "[Intro] [Verse 1] [Chorus] [Verse 2] [Chorus] [Bridge] [Final Chorus] [Outro]",
}

STYLE_ENHANCEMENTS = (
    "with professional studio quality",
    "with a rich arrangement and layered sound",
    "with an emotional delivery and dynamic transitions",
    "with modern production and spatial effects",
    "with a memorable melodic hook",
    "with deep bass and a tight rhythm section",
    "with atmospheric pads and reverb",
    "with a cinematic sound",
)

_SECTION_PATTERNS = {
    "style": re.compile(r"(?:стиль|style)\s*[:\-]\s*([^\n]+)", re.IGNORECASE),
    "lyrics": re.compile(r"(?:лирика|lyrics)\s*[:\-]\s*([^\n]+)", re.IGNORECASE),
    "structure": re.compile(r"(?:структура|structure)\s*[:\-]\s*([^\n]+)", re.IGNORECASE),
}


def _section(pattern_name: str, text: str) -> str:
    match = _SECTION_PATTERNS[pattern_name].search(text)
    return match.group(1).strip() if match else ""


class PromptEnhancer:
    """LLM-backed prompt enhancement with a deterministic local fallback."""

    def __init__(
        self,
        model: Optional[Union[Model, str]] = None,
        *,
        max_tokens: int = 500,
        temperature: float = 0.7,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.model = model
        self.model_settings = ModelSettings(max_tokens=max_tokens, temperature=temperature)
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PromptEnhancer":
        openai = settings.openai
        if not openai.api_key:
            logger.info("OPENAI_API_KEY not set; prompt enhancement uses the local fallback")
            return cls()

        from pydantic_ai.models.openai import OpenAIResponsesModel
        from pydantic_ai.providers.openai import OpenAIProvider

        return cls(OpenAIResponsesModel(openai.model, provider=OpenAIProvider(api_key=openai.api_key)))

    async def enhance(
        self,
        prompt: str,
        style: str = "",
        target_language: str = "russian",
        enhancement_type: EnhancementType = EnhancementType.complete,
    ) -> PromptEnhancement:
        """Enhance ``prompt``, preferring the LLM when one is configured."""
        if self.model is not None:
            try:
                return await self.enhance_with_llm(prompt, style, target_language, enhancement_type)
            except AgentRunError as e:
                logger.warning(f"LLM prompt enhancement failed, using local fallback: {e}")
        return self.enhance_locally(prompt, style)

    async def enhance_with_llm(
        self,
        prompt: str,
        style: str,
        target_language: str,
        enhancement_type: EnhancementType,
    ) -> PromptEnhancement:
        if self.model is None:
            raise RuntimeError("No LLM model configured")

        agent: Agent = Agent(
            self.model,
            system_prompt=SYSTEM_PROMPTS[enhancement_type].format(language=target_language),
            model_settings=self.model_settings,
        )
        result = await agent.run(
            f'Original prompt: "{prompt}"\n'
            f'Style context: "{style}"\n\n'
            "Please enhance this into a professional music production description."
        )
        content = str(result.output)

        music_style = suggested_lyrics = structural_tags = ""
        if enhancement_type is EnhancementType.complete:
            music_style = _section("style", content)
            suggested_lyrics = _section("lyrics", content)
            structural_tags = _section("structure", content)

        return PromptEnhancement(
            enhanced_prompt=content,
            music_style=music_style or content,
            suggested_lyrics=suggested_lyrics,
            structural_tags=structural_tags,
            method=EnhancementMethod.openai,
            tokens_used=getattr(result.usage, "total_tokens", 0) or 0,
        )

    def enhance_locally(self, prompt: str, style: str = "") -> PromptEnhancement:
        """Template-based enhancement used without an LLM."""
        style_key = style.lower()
        phrase = self._rng.choice(STYLE_PHRASES)
        production = self._rng.choice(PRODUCTION_PHRASES)
        instruments = ", ".join(STYLE_INSTRUMENTS.get(style_key, STYLE_INSTRUMENTS["pop"])[:3])

        return PromptEnhancement(
            enhanced_prompt=f"{prompt}, {phrase}, with an emphasis on {instruments}, {production}",
            music_style=f"{style} style with {instruments}".strip(),
            structural_tags=STRUCTURES.get(style_key, STRUCTURES["pop"]),
            method=EnhancementMethod.fallback,
        )

    def enhance_style_locally(self, content: str) -> str:
        return f"{content}, {', '.join(self._rng.sample(STYLE_ENHANCEMENTS, 2))}"

    async def enhance_style(self, content: str, suno: SunoClient) -> StyleEnhancement:
        """Enhance a style description through Suno, locally when Suno fails."""
        try:
            payload = await suno.style_enhance(content)
        except ProviderError as e:
            logger.warning(f"Suno style enhancement failed, using local fallback: {e}")
            return StyleEnhancement(
                enhanced_style=self.enhance_style_locally(content),
                original_content=content,
                method=EnhancementMethod.local_fallback,
            )

        enhanced = SunoClient.enhanced_style(payload)
        if enhanced is None:
            return StyleEnhancement(
                enhanced_style=self.enhance_style_locally(content),
                original_content=content,
                method=EnhancementMethod.local_fallback,
                provider_response=payload,
            )
        return StyleEnhancement(
            enhanced_style=enhanced,
            original_content=content,
            method=EnhancementMethod.suno_api,
            provider_response=payload,
        )
