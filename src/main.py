from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import structlog
import logging
import asyncio
import os

from core.config import settings
from core.db import StorageError, get_store

from routes.forms import router as forms_router
from routes.admin import router as admin_router


BASE_DIR = os.path.dirname(__file__)
STATIC_DIR = os.path.join(BASE_DIR, "frontend/static")

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO), format="%(message)s")

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)
log = structlog.get_logger(__name__)

app = FastAPI()

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

app.include_router(forms_router)
app.include_router(admin_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    JSON malformado cai aqui: responde no mesmo formato das validações dos
    formulários.
    """
    errors = [err.get("msg", "Invalid request.") for err in exc.errors()]
    log.info("request.invalid", path=request.url.path, errors=errors)
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


@app.on_event("startup")
async def init_database():
    """
    Cria a pasta de dados e as tabelas, se ainda não existirem.
    """
    store = app.dependency_overrides.get(get_store, get_store)()
    try:
        await asyncio.to_thread(store.create_all)
    except StorageError as e:
        log.error("db.init_failed", error=str(e))
        raise
    log.info("server.startup", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    import uvicorn

    # só escuta em localhost
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
