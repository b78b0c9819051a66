"""
FastAPI dependencies shared by the routers
"""

from typing import Annotated

from fastapi import Cookie, HTTPException, Request

import quizroom.config
from quizroom.auth import require_user
from quizroom.database import Database


def get_database(request: Request) -> Database:
    """Get the process-wide Database created at startup"""
    return request.app.state.database


def verify_user_auth(
    user_session: Annotated[str | None, Cookie()] = None,
) -> str:
    """Verify the identity cookie and return the user id"""
    settings = quizroom.config.settings
    return require_user(user_session, settings.secret_key, max_age=settings.session_max_age)


def require_debug() -> None:
    """Hide debug routes unless debug mode is on"""
    if not quizroom.config.settings.debug:
        raise HTTPException(status_code=404, detail="Not Found")
