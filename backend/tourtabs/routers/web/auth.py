import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from jose import JWTError
from pydantic import ValidationError

from tourtabs.auth.dependencies import get_public_client, redirect_to_login
from tourtabs.core.config import SESSION_COOKIE, SESSION_MAX_AGE
from tourtabs.core.constants import GENERIC_ERROR
from tourtabs.core.security import create_session_token, read_session_token
from tourtabs.core.templates import templates
from tourtabs.schemas.user import LoginForm
from tourtabs.services.api_client import ApiClient, ApiError, BackendError, Unauthorized, ValidationFailed, unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _extract_login(payload) -> tuple:
    data = unwrap(payload) or {}
    if not isinstance(data, dict):
        return None, None
    token = data.get("token") or data.get("access_token") or payload.get("token")
    user = data.get("user") or {}
    return token, user.get("name")


# ------------------------
# Login Page
# ------------------------
@router.get("/login", response_class=HTMLResponse, name="login_page")
def login_page(request: Request):
    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {"error": None}
    )


# ------------------------
# Login Submit
# ------------------------
@router.post("/login", name="login_submit")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    client: ApiClient = Depends(get_public_client),
):
    try:
        form = LoginForm(email=email.strip(), password=password)
    except ValidationError:
        return redirect_to_login(request, "Invalid email or password")

    try:
        payload = client.post("/auth/login", {"email": form.email, "password": form.password})
    except (Unauthorized, ValidationFailed) as e:
        logger.info("Login rejected for %s: %s", form.email, e.message)
        return redirect_to_login(request, "Invalid email or password")
    except ApiError as e:
        logger.error("Login request failed for %s: %s", form.email, e.message)
        return redirect_to_login(request, GENERIC_ERROR)

    token, user_name = _extract_login(payload)
    if not token:
        logger.error("Login response for %s carried no token", form.email)
        return redirect_to_login(request, "Invalid email or password")

    response = RedirectResponse(
        url=request.url_for("dashboard"),
        status_code=status.HTTP_302_FOUND
    )
    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session_token(token, user_name),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax"
    )
    logger.info("Operator %s logged in", form.email)
    return response


@router.post("/logout", name="logout")
def logout(
    request: Request,
    client: ApiClient = Depends(get_public_client),
):
    session_token = request.cookies.get(SESSION_COOKIE)
    if session_token:
        try:
            client.token = read_session_token(session_token)["api_token"]
            client.post("/auth/logout")
        except (JWTError, BackendError) as e:
            # the local session is dropped either way
            logger.info("Backend logout skipped: %s", e)

    response = RedirectResponse(
        url=request.url_for("login_page"),
        status_code=status.HTTP_303_SEE_OTHER
    )
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response
