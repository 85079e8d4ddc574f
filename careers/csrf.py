from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from careers.logger import get_logger
from careers.sessions import getSession

logger = get_logger(__name__)


class CSRFMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT", "DELETE"):
            session_id = request.cookies.get("session_id")
            if not session_id:
                return JSONResponse(
                    {"detail": "Missing session"},
                    status_code=status.HTTP_403_FORBIDDEN,
                )

            try:
                session = getSession(session_id=session_id)
            except HTTPException:
                return JSONResponse(
                    {"detail": "Invalid session"},
                    status_code=status.HTTP_403_FORBIDDEN,
                )

            expected_token = session.csrfToken

            # JSON clients send the token as a header, HTML forms as a field
            content_type = request.headers.get("content-type", "")
            if content_type.startswith("application/json"):
                actual_token = request.headers.get("x-csrf-token")
            elif content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
                # the body must be cached before parsing so the route can read it again
                await request.body()
                form = await request.form()
                actual_token = form.get("_csrf")
            else:
                actual_token = None

            if actual_token != expected_token:
                logger.warning(f"[CSRF] Rejected {request.method} {request.url.path}")
                return JSONResponse(
                    {"detail": "CSRF token invalid or missing"},
                    status_code=status.HTTP_403_FORBIDDEN,
                )

        return await call_next(request)
