from fastapi import APIRouter, Depends, HTTPException

from deps import get_registry
from models.team import Team
from store import SessionNotFound, SessionRegistry

router = APIRouter(tags=["teams"])


@router.get("/session/{session_id}/teams", response_model=list[Team])
async def get_teams(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Snapshot of the session's three teams, in roster order."""
    try:
        return await registry.get_teams(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/session/{session_id}/teams/{index}", response_model=Team)
async def modify_team(
    session_id: str,
    index: int,
    body: Team,
    registry: SessionRegistry = Depends(get_registry),
):
    """
    Replaces the name and score of one team and returns the stored team.
    `buzz_lock_owned` in the body is ignored; use the buzz endpoints for that.
    An out-of-range index is reported exactly like a missing session.
    """
    try:
        return await registry.set_team(session_id, index, body)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
