from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


def _required_text(value: str, field_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"Поле {field_name} не может быть пустым")
    return value


class OptionIn(BaseModel):
    """Вариант ответа"""
    text: str
    is_correct: bool = False

    @field_validator("text")
    def validate_text(cls, v):
        return _required_text(v, "text")


class QuestionCreate(BaseModel):
    """
    Вопрос во входящем payload POST /api/questions.

    Лишние поля (comments, is_ruf, created_at, _id) молча отбрасываются:
    is_ruf выставляет сервер, комментарии живут своей жизнью.
    """
    question_text: str
    subject: str
    topic: str
    difficulty: Optional[str] = None
    options: List[OptionIn] = Field(default_factory=list)
    explanation: Optional[str] = None

    @field_validator("question_text", "subject", "topic")
    def validate_required(cls, v, info):
        return _required_text(v, info.field_name)

    @field_validator("difficulty", mode="before")
    def coerce_difficulty(cls, v):
        # null от клиента == "без сложности"
        return "" if v is None else v


class CommentUpsert(BaseModel):
    """Тело PUT /api/questions/{id}/comment"""
    comment: str
    user_id: Optional[str] = None

    @field_validator("user_id", mode="before")
    def coerce_user_id(cls, v):
        if v is None:
            return v
        return str(v)


class CommentSaved(BaseModel):
    success: bool = True
    message: str


class QuestionsUpserted(BaseModel):
    success: bool = True
    inserted_or_updated: int
    questions: List[Dict[str, Any]]
    errors: List[Dict[str, Any]] = Field(default_factory=list)
