from urllib.parse import quote, unquote

from fastapi import Request, status
from fastapi.responses import RedirectResponse

FLASH_CATEGORIES = ("success", "error")


def set_flash(response, message: str, category: str = "success"):
    # cookie headers are latin-1, messages are mostly Thai
    response.set_cookie(f"flash_{category}", quote(message), max_age=5)
    return response


def flash_redirect(url, message: str, category: str = "success"):
    response = RedirectResponse(url=str(url), status_code=status.HTTP_303_SEE_OTHER)
    return set_flash(response, message, category)


def flash_error(url, message: str):
    return flash_redirect(url, message, category="error")


def read_flash(request: Request) -> dict:
    messages = {}
    for category in FLASH_CATEGORIES:
        value = request.cookies.get(f"flash_{category}")
        if value:
            messages[category] = unquote(value)
    return messages
