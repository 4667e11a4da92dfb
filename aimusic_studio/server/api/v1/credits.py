"""
Credits API Endpoint.

Reports the Suno credit balance. When Suno cannot answer, the balance is
estimated from the caller's spending over the last 24 hours.
"""

from fastapi import APIRouter

from aimusic_studio.core.models.io import CreditsInfo
from aimusic_studio.server.services.deps import CurrentUser, ProvidersDep, SessionDep
from aimusic_studio.services import check_credits

router = APIRouter()


@router.get(
    "",
    response_model=CreditsInfo,
    summary="Check Credits",
    description="Remaining Suno credits, or an estimate (method 'estimated') when Suno is unavailable.",
)
async def get_credits(user: CurrentUser, session: SessionDep, providers: ProvidersDep) -> CreditsInfo:
    return await check_credits(session, providers.suno, user.id)
