from pydantic import BaseModel, Field
from typing import List, Optional


class RegistrationData(BaseModel):
    name: str
    email: str
    address: str = ""
    contact: str

class ContactData(BaseModel):
    name: str
    email: str
    message: str

class ScoreData(BaseModel):
    score: float
    details: Optional[str] = None

class MailData(BaseModel):
    to: List[str]
    subject: str
    body: str

class AnswersData(BaseModel):
    # q1..q12 -> 1..4; perguntas sem resposta ficam de fora
    answers: dict[int, int] = Field(default_factory=dict)


class SubmissionResponse(BaseModel):
    success: bool
    id: Optional[int] = None
    message: Optional[str] = None

class ErrorResponse(BaseModel):
    success: bool = False
    errors: List[str]

class MailResponse(BaseModel):
    success: bool
    id: Optional[int] = None
    sent: bool = False
    message: str

class AssessmentResponse(BaseModel):
    success: bool = True
    complete: bool
    id: Optional[int] = None
    score: Optional[float] = None
    state: Optional[str] = None
    advice: Optional[str] = None
    background: Optional[str] = None
    color: Optional[str] = None
    message: Optional[str] = None
