import logging

from fastapi import HTTPException, status

from oracle.config import settings

logger = logging.getLogger(__name__)


async def require_upstream_credentials() -> str:
    """Return the Anthropic API key. Raises 500 if it is not configured."""
    if not settings.anthropic_api_key:
        logger.error("ANTHROPIC_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Anthropic API key not configured",
        )
    return settings.anthropic_api_key
