"""
API Dependencies.

Singletons shared by the routes (provider clients, progress hub, prompt
enhancer, auth verifier) and the request dependencies built on them:
database session, authenticated user and admin guard.
"""

import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from aimusic_studio.core.database import async_session_maker, get_session
from aimusic_studio.providers import ProviderRegistry
from aimusic_studio.server.core.config import settings
from aimusic_studio.services import GenerationService, PipelineService, ProgressHub, PromptEnhancer, get_progress_hub

from .auth import AuthenticatedUser, AuthVerifier, parse_bearer

_providers: Optional[ProviderRegistry] = None
_enhancer: Optional[PromptEnhancer] = None
_verifier: Optional[AuthVerifier] = None


def get_providers() -> ProviderRegistry:
    global _providers
    if _providers is None:
        _providers = ProviderRegistry.from_settings(settings)
    return _providers


def get_prompt_enhancer() -> PromptEnhancer:
    global _enhancer
    if _enhancer is None:
        _enhancer = PromptEnhancer.from_settings(settings)
    return _enhancer


def get_auth_verifier() -> AuthVerifier:
    global _verifier
    if _verifier is None:
        auth = settings.auth
        if not auth.url:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="AUTH_URL not configured")
        _verifier = AuthVerifier(auth.url, auth.api_key)
    return _verifier


async def close_singletons() -> None:
    """Close the HTTP clients held by the singletons (application shutdown)."""
    global _providers, _verifier
    if _providers is not None:
        await _providers.aclose()
        _providers = None
    if _verifier is not None:
        await _verifier.aclose()
        _verifier = None


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ProvidersDep = Annotated[ProviderRegistry, Depends(get_providers)]
HubDep = Annotated[ProgressHub, Depends(get_progress_hub)]
EnhancerDep = Annotated[PromptEnhancer, Depends(get_prompt_enhancer)]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_maker


def get_generation_service(
    providers: ProvidersDep,
    hub: HubDep,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> GenerationService:
    return GenerationService(session_factory, providers, hub)


GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]


def get_pipeline_service(
    providers: ProvidersDep,
    enhancer: EnhancerDep,
    generation: GenerationServiceDep,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> PipelineService:
    return PipelineService(session_factory, providers, enhancer, generation)


PipelineServiceDep = Annotated[PipelineService, Depends(get_pipeline_service)]


async def get_current_user(
    authorization: Annotated[Optional[str], Header()] = None,
    verifier: AuthVerifier = Depends(get_auth_verifier),
) -> AuthenticatedUser:
    """Resolve the caller from the ``Authorization: Bearer`` header (401 otherwise)."""
    token = parse_bearer(authorization)
    return await verifier.verify(token)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


async def require_admin(x_admin_token: Annotated[Optional[str], Header()] = None) -> None:
    """Guard admin endpoints with the static ``X-Admin-Token`` header."""
    expected = settings.auth.admin_token
    if not expected:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="ADMIN_TOKEN not configured")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin token required")
