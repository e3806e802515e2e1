from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from deps import get_registry
from store import SessionRegistry

router = APIRouter(tags=["session"])


# ---------- Endpoints ----------

@router.post("/session/start", response_model=str)
async def start_session(registry: SessionRegistry = Depends(get_registry)):
    """
    Creates a new session with three default teams.
    Returns the session id as a bare JSON string.
    """
    return await registry.create()


@router.get("/session/{session_id}", response_model=Optional[str])
async def get_session_id(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Echoes the id back if the session is live, 404 with `null` otherwise."""
    if await registry.exists(session_id):
        return session_id
    return JSONResponse(status_code=404, content=None)


@router.post("/session/{session_id}/close", response_model=bool)
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    if await registry.close(session_id):
        return True
    return JSONResponse(status_code=404, content=False)
