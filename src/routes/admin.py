import asyncio
import os
import secrets
import structlog

from fastapi import APIRouter, Depends, HTTPException, Request, Security, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.templating import Jinja2Templates
from typing import Optional

from core.config import Settings, get_settings
from core.db import StorageError, SubmissionStore, get_store


log = structlog.get_logger()
basic = HTTPBasic(auto_error=False, realm="Admin Area")
router = APIRouter()

BASE_DIR = os.path.dirname(__file__)
TEMPLATES_DIR = os.path.normpath(os.path.join(BASE_DIR, "..", "frontend", "templates"))
templates = Jinja2Templates(directory=TEMPLATES_DIR)

RECENT_LIMIT = 50
CHALLENGE = {"WWW-Authenticate": 'Basic realm="Admin Area"'}

# tabela -> colunas exibidas no painel
ADMIN_TABLES = (
    ("Registrations", "registrations", ("id", "name", "email", "contact", "receivedAt")),
    ("Contacts", "contacts", ("id", "name", "email", "message", "receivedAt")),
    ("Scores", "scores", ("id", "score", "details", "receivedAt")),
    ("Mails", "mails", ("id", "recipients", "subject", "status", "sentAt")),
)


# Admin auth
async def admin_required(
    credentials: Optional[HTTPBasicCredentials] = Security(basic),
    settings: Settings = Depends(get_settings),
) -> str:
    if not credentials:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Authentication required", headers=CHALLENGE)

    user_ok = secrets.compare_digest(credentials.username.encode(), settings.ADMIN_USER.encode())
    pass_ok = secrets.compare_digest(credentials.password.encode(), settings.ADMIN_PASS.encode())
    if not (user_ok and pass_ok):
        log.warning("admin.invalid_credentials", user=credentials.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid credentials", headers=CHALLENGE)
    return credentials.username


@router.get("/admin", response_class=HTMLResponse)
async def admin_page(
    request: Request,
    user: str = Depends(admin_required),
    store: SubmissionStore = Depends(get_store),
):
    """ Últimas submissões de cada tabela, só leitura."""
    sections = []
    try:
        for title, table, columns in ADMIN_TABLES:
            rows = await asyncio.to_thread(store.recent, table, RECENT_LIMIT)
            sections.append({"title": title, "columns": columns, "rows": rows})
    except StorageError as e:
        log.error("admin.db_error", error=str(e))
        return PlainTextResponse("Could not load admin page", status_code=500)

    log.info("admin.viewed", user=user)
    return templates.TemplateResponse(request, "admin.html", {"sections": sections})
