import uuid
import asyncio
import time
import threading
from contextlib import asynccontextmanager
from typing import Optional
from pydantic import BaseModel, Field
from fastapi import FastAPI, HTTPException
from careers import config
from careers.ee import EventEmitter
from careers.jobs import FilterCriteria
from careers.logger import get_logger

logger = get_logger(__name__)


class Flash(BaseModel):
    message: str
    level: str = "info"

class Session(BaseModel):
    filter: FilterCriteria
    slug: str = ""
    bus: EventEmitter
    csrfToken: str
    stream: asyncio.Queue[str]
    flashes: list[Flash] = Field(default_factory=list)
    last_seen: int = 0
    model_config = {
        "arbitrary_types_allowed": True
    }


sessions: dict[str, Session] = {}

def createSession() -> str:
    session_id = str(uuid.uuid4())
    sessions[session_id] = Session(
      filter=FilterCriteria(),
      bus=EventEmitter(),
      csrfToken=uuid.uuid4().hex,
      stream=asyncio.Queue(),
      last_seen=int(time.time())
    )
    logger.debug(f"[Session] Created {session_id}")
    return session_id

def getSession(*, session_id: Optional[str]) -> Session:
    if not session_id or session_id not in sessions:
        raise HTTPException(status_code=400, detail="Invalid Session")
    return sessions[session_id]

def updateFilter(*, session_id: str, slug: str, filter: FilterCriteria):
    """Store the visitor's criteria for ``slug`` and notify the results stream."""
    session = getSession(session_id=session_id)
    touch_session(session_id=session_id)
    session.slug = slug
    session.filter = filter
    session.bus.emit('update')

def touch_session(*, session_id: str):
    session = getSession(session_id=session_id)
    session.last_seen = int(time.time())

def flash(*, session_id: str, message: str, level: str = "info"):
    getSession(session_id=session_id).flashes.append(Flash(message=message, level=level))

def pop_flashes(*, session_id: str) -> list[Flash]:
    session = getSession(session_id=session_id)
    messages, session.flashes = session.flashes, []
    return messages

def expire_sessions(now: Optional[float] = None) -> list[str]:
    now = time.time() if now is None else now
    expired = [
        sid for sid, session in sessions.items()
        if now - session.last_seen > config.SESSION_TTL
    ]
    for sid in expired:
        logger.info(f"[Session Cleanup] Removing inactive session: {sid}")
        sessions.pop(sid, None)
    return expired

def cleanup_sessions_loop():
    while True:
        expire_sessions()
        time.sleep(config.CLEANUP_INTERVAL)

@asynccontextmanager
async def lifespan(app: FastAPI):
    thread = threading.Thread(target=cleanup_sessions_loop, daemon=True)
    thread.start()
    logger.info("[Startup] Session cleanup thread started")

    yield

    logger.info("[Shutdown] Application shutting down")
