import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from tourtabs.auth.dependencies import redirect_to_login
from tourtabs.core.config import LOG_LEVEL, SESSION_COOKIE
from tourtabs.routers.web import admin_dashboard, auth, festivals, tour_tabs
from tourtabs.services.api_client import Unauthorized

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title="Tour Tabs Admin")
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(auth.router)
app.include_router(admin_dashboard.router)
app.include_router(tour_tabs.router)
app.include_router(festivals.router)


@app.get("/", include_in_schema=False)
def index(request: Request):
    return RedirectResponse(url=request.url_for("dashboard"), status_code=status.HTTP_302_FOUND)


@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized):
    # the only place a session is torn down after the backend rejects it
    logger.info("Session rejected on %s: %s", request.url.path, exc.message)
    response = redirect_to_login(request, "Please login to continue")
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response
