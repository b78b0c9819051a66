"""
Identity cookie helpers

The user id comes from an external auth provider and is treated as an opaque
string. Presence of a valid signed id is the only authorization check.
"""

from fastapi import HTTPException
from itsdangerous import BadSignature, SignatureExpired, TimestampSigner

USER_COOKIE_NAME = "user_session"


def create_user_cookie(user_id: str, secret_key: str) -> str:
    """
    Create a signed cookie for a user id

    Args:
        user_id: Opaque presenter/participant id
        secret_key: Secret key for signing

    Returns:
        Signed cookie string
    """
    signer = TimestampSigner(secret_key)
    return signer.sign(user_id).decode()


def verify_user_cookie(
    cookie: str | None,
    secret_key: str,
    max_age: int | None = None,
) -> str | None:
    """
    Verify a user cookie and return the user id

    Args:
        cookie: Signed cookie string
        secret_key: Secret key for verification
        max_age: Optional max age in seconds (None = no limit)

    Returns:
        User id if valid, None if invalid or expired
    """
    if not cookie:
        return None

    signer = TimestampSigner(secret_key)
    try:
        if max_age is not None:
            user_id = signer.unsign(cookie, max_age=max_age).decode()
        else:
            user_id = signer.unsign(cookie).decode()
    except (BadSignature, SignatureExpired, UnicodeDecodeError):
        return None

    return user_id or None


def require_user(
    cookie: str | None,
    secret_key: str,
    max_age: int | None = None,
) -> str:
    """
    Require a valid user cookie

    Raises:
        HTTPException: If cookie is invalid or missing
    """
    user_id = verify_user_cookie(cookie, secret_key, max_age=max_age)

    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing user cookie",
        )

    return user_id
