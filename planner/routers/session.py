from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime

from planner.dependencies import get_session_store
from planner.services.session_store import SessionStore

router = APIRouter(tags=["session"])


class SessionResponse(BaseModel):
    sessionId: str
    createdAt: datetime
    expiresAt: datetime


@router.post("/session", response_model=SessionResponse)
def create_session(store: SessionStore = Depends(get_session_store)):
    session_id = store.create_session()
    return get_session(session_id, store)


@router.get("/session/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = store.get_session(session_id)
    return SessionResponse(
        sessionId=session.session_id,
        createdAt=session.created_at,
        expiresAt=session.expires_at
    )
