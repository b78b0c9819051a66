"""
Identity session routes
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Response
from pydantic import BaseModel

import quizroom.config
from quizroom.auth import USER_COOKIE_NAME, create_user_cookie
from quizroom.dependencies import verify_user_auth

router = APIRouter(prefix="/api/session")


class SessionResponse(BaseModel):
    """Response for session operations"""
    status: str
    user_id: str | None = None


@router.post("")
async def start_session(
    response: Response,
    user_id: Annotated[str, Form(min_length=1)],
) -> SessionResponse:
    """
    Sign the user id handed over by the auth provider and set it as a cookie
    """
    settings = quizroom.config.settings
    cookie = create_user_cookie(user_id, settings.secret_key)

    response.set_cookie(
        key=USER_COOKIE_NAME,
        value=cookie,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=settings.session_max_age,
    )

    return SessionResponse(status="signed_in", user_id=user_id)


@router.get("")
async def current_session(
    user_id: Annotated[str, Depends(verify_user_auth)],
) -> SessionResponse:
    """Return the signed-in user id"""
    return SessionResponse(status="signed_in", user_id=user_id)


@router.delete("")
async def end_session(response: Response) -> SessionResponse:
    """Clear the identity cookie"""
    response.delete_cookie(key=USER_COOKIE_NAME)
    return SessionResponse(status="signed_out")
