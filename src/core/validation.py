"""
Validação dos formulários do site.

Cada função recebe o corpo JSON já decodificado e devolve um
``ValidationResult``: ou os dados normalizados (strings aparadas, prontos
para sanitização e persistência) ou a lista de mensagens de erro legíveis
que vai para o cliente com HTTP 400. Todos os erros do payload são
acumulados, não só o primeiro.
"""
import math
import re

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel

from schemas.forms import (
    AnswersData,
    ContactData,
    MailData,
    RegistrationData,
    ScoreData,
)


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
QUESTION_COUNT = 12


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    data: Optional[BaseModel] = None

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass
class FieldCheck:
    error: Optional[str] = None
    value: Optional[str] = None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def validate_string_field(value: Any, field_name: str, min_length: int = 1, max_length: int = 255) -> FieldCheck:
    """
    Confere tipo e tamanho (após ``strip``) de um campo texto.
    """
    if not isinstance(value, str):
        return FieldCheck(error=f"{field_name} must be a string.")
    trimmed = value.strip()
    if len(trimmed) < min_length:
        return FieldCheck(error=f"{field_name} is required (minimum {min_length} character).")
    if len(trimmed) > max_length:
        return FieldCheck(error=f"{field_name} exceeds maximum length of {max_length} characters.")
    return FieldCheck(value=trimmed)


def _check_email(value: Any, errors: List[str]) -> Optional[str]:
    if not value or not isinstance(value, str):
        errors.append("Email is required.")
        return None
    trimmed = value.strip()
    if not is_valid_email(trimmed):
        errors.append("Email format is invalid.")
        return None
    if len(trimmed) > 255:
        errors.append("Email exceeds maximum length of 255 characters.")
        return None
    return trimmed


def _check_optional_text(value: Any, field_name: str, max_length: int, errors: List[str],
                         verb: str = "exceeds") -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        errors.append(f"{field_name} must be a string.")
        return None
    trimmed = value.strip()
    if len(trimmed) > max_length:
        errors.append(f"{field_name} {verb} maximum length of {max_length} characters.")
        return None
    return trimmed


def _as_mapping(payload: Any) -> dict:
    return payload if isinstance(payload, dict) else {}


def validate_registration(payload: Any) -> ValidationResult:
    data = _as_mapping(payload)
    errors: List[str] = []

    name = validate_string_field(data.get("name"), "Name", 1, 100)
    if name.error:
        errors.append(name.error)

    email = _check_email(data.get("email"), errors)

    # telefone ou similar
    contact = validate_string_field(data.get("contact"), "Contact", 1, 20)
    if contact.error:
        errors.append(contact.error)

    address = _check_optional_text(data.get("address"), "Address", 500, errors)

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(data=RegistrationData(
        name=name.value,
        email=email,
        address=address or "",
        contact=contact.value,
    ))


def validate_contact(payload: Any) -> ValidationResult:
    data = _as_mapping(payload)
    errors: List[str] = []

    name = validate_string_field(data.get("name"), "Name", 1, 100)
    if name.error:
        errors.append(name.error)

    email = _check_email(data.get("email"), errors)

    message = validate_string_field(data.get("message"), "Message", 10, 5000)
    if message.error:
        errors.append(message.error)

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(data=ContactData(name=name.value, email=email, message=message.value))


def validate_score(payload: Any) -> ValidationResult:
    data = _as_mapping(payload)
    errors: List[str] = []

    score = data.get("score")
    if score is None:
        errors.append("Score is required.")
    elif isinstance(score, bool) or not isinstance(score, (int, float)):
        errors.append("Score must be a number.")
    elif isinstance(score, float) and not math.isfinite(score):
        errors.append("Score must be a number.")
    elif score < 0 or score > 4:
        errors.append("Score must be between 0 and 4.")

    details = _check_optional_text(data.get("details"), "Details", 1000, errors, verb="exceed")

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(data=ScoreData(score=score, details=details))


def validate_mail(payload: Any) -> ValidationResult:
    data = _as_mapping(payload)
    errors: List[str] = []
    recipients: List[str] = []

    to = data.get("to")
    if not to:
        errors.append("Recipient email is required.")
    elif isinstance(to, list):
        for email in to:
            if not isinstance(email, str) or not is_valid_email(email.strip()):
                errors.append(f"Invalid email format: {email}")
            else:
                recipients.append(email.strip())
    elif isinstance(to, str):
        if not is_valid_email(to.strip()):
            errors.append("Recipient email format is invalid.")
        else:
            recipients.append(to.strip())
    else:
        errors.append("Recipient must be a string or array of strings.")

    subject = validate_string_field(data.get("subject"), "Subject", 1, 255)
    if subject.error:
        errors.append(subject.error)

    body = validate_string_field(data.get("body"), "Message body", 1, 10000)
    if body.error:
        errors.append(body.error)

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(data=MailData(to=recipients, subject=subject.value, body=body.value))


def validate_answers(payload: Any) -> ValidationResult:
    """
    Respostas do questionário (``q1`` .. ``q12``), cada uma de 1 a 4.

    Aceita tanto ``{"q1": 4, ...}`` quanto ``{"answers": {"q1": "4", ...}}``;
    valores vindos de radio buttons chegam como string. Pergunta sem
    resposta não é erro: o questionário fica incompleto e quem decide o que
    fazer é ``core.assessment.assess``.
    """
    data = _as_mapping(payload)
    if isinstance(data.get("answers"), dict):
        data = data["answers"]
    errors: List[str] = []
    answers = {}

    for i in range(1, QUESTION_COUNT + 1):
        raw = data.get(f"q{i}")
        if raw is None or raw == "":
            continue
        if isinstance(raw, str) and raw.strip().isdecimal():
            try:
                raw = int(raw.strip())
            except ValueError:
                pass  # acima do limite de dígitos do int(); cai no erro abaixo
        if isinstance(raw, bool) or not isinstance(raw, int) or not 1 <= raw <= 4:
            errors.append(f"Answer q{i} must be an integer between 1 and 4.")
            continue
        answers[i] = raw

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(data=AnswersData(answers=answers))
