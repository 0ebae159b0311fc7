from typing import List
from pydantic import BaseModel, Field


class UserStats(BaseModel):
    """Счётчики пользователя; для неизвестного пользователя - нули"""
    user_id: str
    total_score: int = 0
    total_attempts: int = 0
    weak_topics: List[str] = Field(default_factory=list)
