import asyncio
import os
import structlog

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from core.assessment import QUESTIONS, ANSWER_CHOICES, assess
from core.db import StorageError, SubmissionStore, get_store, utc_now_iso
from core.sanitize import sanitize_html
from core.validation import (
    validate_answers,
    validate_contact,
    validate_mail,
    validate_registration,
    validate_score,
)
from schemas.forms import (
    AssessmentResponse,
    ErrorResponse,
    MailResponse,
    SubmissionResponse,
)
from utils.mailer import MailDeliveryError, Mailer, get_mailer


router = APIRouter()
log = structlog.get_logger()

BASE_DIR = os.path.dirname(__file__)
TEMPLATES_DIR = os.path.normpath(os.path.join(BASE_DIR, "..", "frontend", "templates"))
templates = Jinja2Templates(directory=TEMPLATES_DIR)


def invalid(errors: List[str]) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse(errors=errors).model_dump())


def failure(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SubmissionResponse(success=False, message=message).model_dump(exclude_none=True),
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {
        "questions": QUESTIONS,
        "choices": ANSWER_CHOICES,
    })


@router.get("/alive")
async def alive():
    return "Alive"


@router.post("/api/register")
async def register(
    payload: Any = Body(None),
    store: SubmissionStore = Depends(get_store),
):
    result = validate_registration(payload)
    if not result.valid:
        log.info("registration.invalid", errors=result.errors)
        return invalid(result.errors)

    data = result.data
    try:
        reg_id = await asyncio.to_thread(
            store.insert_registration,
            sanitize_html(data.name),
            data.email,
            sanitize_html(data.address),
            data.contact,
        )
    except StorageError as e:
        log.error("registration.db_error", error=str(e))
        return failure("Could not save registration.")

    log.info("registration.saved", id=reg_id)
    return JSONResponse(SubmissionResponse(success=True, id=reg_id, message="Registration successful.").model_dump())


@router.post("/api/contact")
async def contact(
    payload: Any = Body(None),
    store: SubmissionStore = Depends(get_store),
):
    result = validate_contact(payload)
    if not result.valid:
        log.info("contact.invalid", errors=result.errors)
        return invalid(result.errors)

    data = result.data
    try:
        contact_id = await asyncio.to_thread(
            store.insert_contact,
            sanitize_html(data.name),
            data.email,
            sanitize_html(data.message),
        )
    except StorageError as e:
        log.error("contact.db_error", error=str(e))
        return failure("Could not save contact.")

    log.info("contact.saved", id=contact_id)
    return JSONResponse(SubmissionResponse(
        success=True, id=contact_id, message="Contact form submitted successfully."
    ).model_dump())


@router.post("/api/score")
async def score(
    payload: Any = Body(None),
    store: SubmissionStore = Depends(get_store),
):
    result = validate_score(payload)
    if not result.valid:
        log.info("score.invalid", errors=result.errors)
        return invalid(result.errors)

    data = result.data
    try:
        score_id = await asyncio.to_thread(store.insert_score, data.score, data.details)
    except StorageError as e:
        log.error("score.db_error", error=str(e))
        return failure("Could not save score.")

    log.info("score.saved", id=score_id, score=data.score)
    return JSONResponse(SubmissionResponse(success=True, id=score_id, message="Score recorded successfully.").model_dump())


@router.post("/api/assessment")
async def assessment(
    payload: Any = Body(None),
    store: SubmissionStore = Depends(get_store),
):
    """
    Calcula o resultado do questionário e, se estiver completo, registra a
    média como score anônimo.
    """
    result = validate_answers(payload)
    if not result.valid:
        log.info("assessment.invalid", errors=result.errors)
        return invalid(result.errors)

    outcome = assess(result.data.answers)
    if not outcome.complete:
        return JSONResponse(AssessmentResponse(
            complete=False,
            message=outcome.message,
            background=outcome.background,
            color=outcome.color,
        ).model_dump(exclude_none=True))

    try:
        score_id = await asyncio.to_thread(store.insert_score, outcome.average, outcome.band.state)
    except StorageError as e:
        log.error("assessment.db_error", error=str(e))
        return failure("Could not save score.")

    log.info("assessment.scored", id=score_id, average=outcome.average, state=outcome.band.state)
    return JSONResponse(AssessmentResponse(
        complete=True,
        id=score_id,
        score=outcome.average,
        state=outcome.band.state,
        advice=outcome.band.advice,
        background=outcome.background,
        color=outcome.color,
    ).model_dump(exclude_none=True))


@router.post("/api/send-mail")
async def send_mail(
    payload: Any = Body(None),
    store: SubmissionStore = Depends(get_store),
    mailer: Optional[Mailer] = Depends(get_mailer),
):
    result = validate_mail(payload)
    if not result.valid:
        log.info("mail.invalid", errors=result.errors)
        return invalid(result.errors)

    data = result.data
    recipients = ",".join(data.to)
    try:
        mail_id = await asyncio.to_thread(
            store.insert_mail, recipients, sanitize_html(data.subject), sanitize_html(data.body)
        )

        if mailer is None:
            await asyncio.to_thread(store.mark_mail, mail_id, "mocked")
            log.info("mail.mocked", id=mail_id, recipients=recipients)
            return JSONResponse(MailResponse(
                success=True, id=mail_id, sent=False, message="No SMTP configured; mail recorded."
            ).model_dump())

        try:
            await mailer.send(data.to, data.subject, data.body)
        except MailDeliveryError as e:
            log.error("mail.send_failed", id=mail_id, error=str(e))
            await asyncio.to_thread(store.mark_mail, mail_id, "failed", None, str(e))
            return JSONResponse(status_code=500, content=MailResponse(
                success=False, id=mail_id, sent=False, message="Mail send failed, logged."
            ).model_dump())

        await asyncio.to_thread(store.mark_mail, mail_id, "sent", utc_now_iso())
        log.info("mail.sent", id=mail_id, recipients=recipients)
        return JSONResponse(MailResponse(
            success=True, id=mail_id, sent=True, message="Email sent successfully."
        ).model_dump())
    except StorageError as e:
        log.error("mail.db_error", error=str(e))
        return failure("Could not record mail.")
