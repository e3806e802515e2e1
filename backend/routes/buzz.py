from fastapi import APIRouter, Depends, HTTPException

from deps import get_registry
from models.session import BuzzResult
from store import SessionNotFound, SessionRegistry

router = APIRouter(tags=["buzz"])


# `release` is registered first so it is not parsed as a team index.

@router.post("/session/{session_id}/buzz/release", response_model=None)
async def release_buzz_lock(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Frees the buzz lock whoever holds it. Releasing a free lock is a no-op."""
    try:
        await registry.release_buzz(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None


@router.post("/session/{session_id}/buzz/{index}", response_model=BuzzResult)
async def buzz_in(session_id: str, index: int, registry: SessionRegistry = Depends(get_registry)):
    """
    Team `index` tries to take the buzz lock.

    Returns "Success" if it got the lock, "Locked" if any team already holds
    it. Losing the race is a normal 200, not an error.
    """
    try:
        return await registry.acquire_buzz(session_id, index)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
