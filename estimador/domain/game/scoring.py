from dataclasses import dataclass
from typing import Optional

from estimador.core.utils_text import parse_decimal

# (umbral % inclusivo, puntos); por encima del último umbral no suma
POINTS_THRESHOLDS = [
    (5, 100),
    (10, 80),
    (20, 50),
    (40, 20),
]


@dataclass(frozen=True)
class RoundResult:
    correct_answer: float
    user_answer: Optional[float]     # None = sin respuesta (vacía, inválida o timeout)
    absolute_difference: float
    percent_difference: float
    points: int


def calculate_points(percent_difference: float) -> int:
    for limit, points in POINTS_THRESHOLDS:
        if percent_difference <= limit:
            return points
    return 0


def evaluate_submission(correct: float, raw_input=None) -> RoundResult:
    """Punto único para respuesta explícita y para timeout (raw_input=None)."""
    user = parse_decimal(raw_input)
    if user is None:
        return RoundResult(
            correct_answer=correct,
            user_answer=None,
            absolute_difference=correct,
            percent_difference=100.0,
            points=0,
        )

    diff = abs(user - correct)
    if correct == 0:
        pct = 0.0 if diff == 0 else 100.0
    else:
        pct = (diff / abs(correct)) * 100
    return RoundResult(
        correct_answer=correct,
        user_answer=user,
        absolute_difference=diff,
        percent_difference=pct,
        points=calculate_points(pct),
    )
