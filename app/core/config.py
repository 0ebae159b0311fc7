# app/core/config.py

from typing import List, Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Загружаем переменные окружения из .env
load_dotenv()


class Settings(BaseSettings):
    # Настройки MongoDB
    MONGO_URI: str
    MONGO_DB_NAME: str = "mcq_quiz"

    # Выдача вопросов
    DEFAULT_QUESTIONS_LIMIT: int = 20
    MAX_QUESTIONS_LIMIT: int = 100

    # Флаг is_ruf, если клиент не прислал явное значение
    DEFAULT_IS_RUF: bool = True

    # Кому засчитывать ответ без user_id ("" - никому)
    ANONYMOUS_USER_ID: Optional[str] = "1"
    DEFAULT_COMMENT_USER_ID: str = "guest"

    # Заливать демо-вопросы при старте, если коллекция пуста
    SEED_SAMPLE_QUESTIONS: bool = False

    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    class Config:
        # Сообщаем Pydantic брать переменные окружения
        env_file = ".env"
        extra = "ignore"


# Создаём экземпляр класса, и теперь по всему проекту можно импортировать
settings = Settings()
