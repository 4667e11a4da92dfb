from __future__ import annotations

import pytest

from aimusic_studio.providers import MurekaClient, ProviderRegistry, SandboxProvider, SunoClient

from ..mock_http import Recorder, no_sleep

SUNO_URL = "http://mock.suno/api/v1"
MUREKA_URL = "http://mock.mureka/v1"


def suno_client(recorder: Recorder, api_key="suno-key", **kwargs) -> SunoClient:
    options = dict(base_url=SUNO_URL, client=recorder.client(), sleep=no_sleep, retry_delay=0)
    options.update(kwargs)
    return SunoClient(api_key, **options)


def mureka_client(recorder: Recorder, api_key="mureka-key", **kwargs) -> MurekaClient:
    options = dict(base_url=MUREKA_URL, health_url="http://mock.mureka/health", client=recorder.client(), sleep=no_sleep)
    options.update(kwargs)
    return MurekaClient(api_key, **options)


@pytest.fixture
def offline_registry() -> ProviderRegistry:
    """Registry whose real clients are unconfigured; only the sandbox works."""
    unused = Recorder(lambda request: pytest.fail(f"unexpected request {request.url}"))
    return ProviderRegistry(
        suno=suno_client(unused, api_key=None),
        mureka=mureka_client(unused, api_key=None),
        sandbox=SandboxProvider(),
    )
