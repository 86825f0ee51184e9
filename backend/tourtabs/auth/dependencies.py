from fastapi import Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError

from tourtabs.core.config import SESSION_COOKIE
from tourtabs.core.security import read_session_token
from tourtabs.services.api_client import ApiClient, Unauthorized
from tourtabs.utils.flash import set_flash


def redirect_to_login(request: Request, message: str):
    response = RedirectResponse(
        url=request.url_for("login_page"),
        status_code=status.HTTP_302_FOUND
    )
    return set_flash(response, message, category="error")


def get_session(request: Request) -> dict:
    session_token = request.cookies.get(SESSION_COOKIE)

    if not session_token:
        raise Unauthorized("Not authenticated", 401)

    try:
        return read_session_token(session_token)
    except JWTError:
        raise Unauthorized("Invalid session", 401)


def get_public_client() -> ApiClient:
    return ApiClient()


def get_api_client(request: Request) -> ApiClient:
    session = get_session(request)
    return ApiClient(token=session["api_token"])
