from dataclasses import dataclass
from typing import Mapping, Optional


QUESTION_COUNT = 12

QUESTIONS = (
    "I feel calm and relaxed most of the day.",
    "I sleep well and wake up rested.",
    "I have enough energy for my daily activities.",
    "I can concentrate on my work or studies.",
    "I enjoy the things I usually like to do.",
    "I feel hopeful about the future.",
    "I can handle stress when things go wrong.",
    "I feel connected to friends or family.",
    "I have someone to talk to when I need support.",
    "I take care of my body (food, exercise, rest).",
    "I feel good about myself.",
    "I can manage my worries without feeling overwhelmed.",
)

# valor do radio button -> rótulo
ANSWER_CHOICES = (
    (1, "Rarely"),
    (2, "Sometimes"),
    (3, "Often"),
    (4, "Almost always"),
)


@dataclass(frozen=True)
class Band:
    state: str
    advice: str
    background: str
    color: str


@dataclass(frozen=True)
class Assessment:
    complete: bool
    average: Optional[float] = None
    band: Optional[Band] = None
    message: Optional[str] = None
    background: str = "#ffc107"
    color: str = "#333"


HEALTHY = Band(
    state="Healthy",
    advice=(
        "You seem to be in a good mental state. Keep maintaining your healthy habits, "
        "stay connected with others, and continue to prioritize your well-being."
    ),
    background="#d4edda",
    color="#155724",
)
MILD = Band(
    state="Mild Concerns",
    advice=(
        "You may be experiencing some minor stress or emotional challenges. It's a good time "
        "to focus on self-care, such as exercise, nutrition, and mindfulness. Talking to a "
        "friend or family member may also be helpful."
    ),
    background="#fff3cd",
    color="#856404",
)
MODERATE = Band(
    state="Moderate Concerns",
    advice=(
        "Your responses suggest you are facing notable mental health challenges. It is highly "
        "recommended to speak with a trusted individual. Exploring resources on our site or "
        "contacting a professional could provide significant support."
    ),
    background="#f8d7da",
    color="#721c24",
)
SEVERE = Band(
    state="Severe Concerns",
    advice=(
        "It appears you are going through a difficult time. Please prioritize your mental "
        "health and seek professional help. You are not alone, and support is available. "
        "Please visit our Contact page to find a professional near you."
    ),
    background="#dc3545",
    color="white",
)

INCOMPLETE_MESSAGE = "Please answer all questions to see your score."


def categorize(average: float) -> Band:
    """
    Converte a média das respostas (1 a 4) na faixa correspondente.
    """
    if average >= 3.5:
        return HEALTHY
    if average >= 3:
        return MILD
    if average >= 2.5:
        return MODERATE
    return SEVERE


def assess(answers: Mapping[int, int]) -> Assessment:
    """
    Avalia o questionário. ``answers`` mapeia o número da pergunta (1..12)
    para a resposta escolhida; se faltar qualquer uma, devolve o estado de
    aviso sem calcular categoria.
    """
    answered = [answers[i] for i in range(1, QUESTION_COUNT + 1) if answers.get(i) is not None]
    if len(answered) < QUESTION_COUNT:
        return Assessment(complete=False, message=INCOMPLETE_MESSAGE)

    average = sum(answered) / QUESTION_COUNT
    band = categorize(average)
    return Assessment(
        complete=True,
        average=average,
        band=band,
        background=band.background,
        color=band.color,
    )
