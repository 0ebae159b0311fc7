# app/core/exceptions.py

"""
Ошибки предметной области.

Сервисный слой бросает их, а обработчик в main.py превращает
в JSON-ответ с нужным HTTP-кодом (см. app.core.response.error).
"""
from typing import Any, Optional


class QuizError(Exception):
    """Базовая ошибка сервиса викторины"""

    status_code = 500
    default_message = "Внутренняя ошибка сервера"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(QuizError):
    """Некорректные или неполные входные данные"""

    status_code = 400
    default_message = "Некорректные данные запроса"


class NotFoundError(QuizError):
    """Запрошенная сущность не существует"""

    status_code = 404
    default_message = "Объект не найден"


class StoreError(QuizError):
    """Ошибка хранилища; сообщение драйвера передаётся клиенту как есть"""

    status_code = 500
    default_message = "Ошибка базы данных"
