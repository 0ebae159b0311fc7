from typing import Optional
from pydantic import BaseModel, field_validator

from app.core.config import settings


class AnswerSubmit(BaseModel):
    """Тело POST /api/answers"""
    question_id: str
    selected_option_index: int
    user_id: Optional[str] = None

    @field_validator("user_id", mode="before")
    def coerce_user_id(cls, v):
        # Фронт шлёт и числа, и строки
        if v is None:
            return v
        return str(v)

    def credited_user_id(self) -> Optional[str]:
        """
        Кому засчитать ответ: поле не прислано - ANONYMOUS_USER_ID,
        явный null - никому.
        """
        if "user_id" not in self.model_fields_set:
            return settings.ANONYMOUS_USER_ID or None
        return self.user_id


class AnswerResult(BaseModel):
    is_correct: bool
    explanation: str
    correct_answer: str
