import pytest

from aimusic_studio.core.models.domain import Provider
from aimusic_studio.providers import (
    GenerationParams,
    MurekaClient,
    ProviderRegistry,
    SandboxProvider,
    SunoClient,
)
from aimusic_studio.providers.sandbox import SAMPLE_AUDIO_URL

pytestmark = pytest.mark.asyncio


async def test_sandbox_fabricates_track():
    provider = SandboxProvider()
    params = GenerationParams(prompt="A very long prompt about rainy city nights", model="test", duration=45)
    progress = []

    async def on_progress(value: int) -> None:
        progress.append(value)

    task_id = await provider.submit(params)
    result = await provider.wait_for_result(task_id, params, on_progress=on_progress)

    assert task_id.startswith("test_")
    assert result.id == task_id
    assert result.title == "Test: A very long prompt about rainy..."
    assert result.audio_url == SAMPLE_AUDIO_URL
    assert result.duration == 45
    assert result.lyrics and "Verse 1" in result.lyrics
    assert progress == [70]


async def test_sandbox_instrumental_has_no_lyrics():
    params = GenerationParams(prompt="Short", model="test", instrumental=True)
    result = await SandboxProvider().wait_for_result("test_1", params)

    assert result.title == "Test: Short"
    assert result.lyrics is None


async def test_registry_routes_by_provider():
    registry = ProviderRegistry(
        suno=SunoClient(None, base_url="http://mock.suno"),
        mureka=MurekaClient(None, base_url="http://mock.mureka"),
        sandbox=SandboxProvider(),
    )
    try:
        assert registry.get("suno") is registry.suno
        assert registry.get(Provider.mureka) is registry.mureka
        assert registry.get("test") is registry.sandbox
        with pytest.raises(ValueError):
            registry.get("udio")
    finally:
        await registry.aclose()
