from enum import Enum
from typing import Dict, Any, Optional
from datetime import datetime
import json
import os
import uuid
import pytz


class LogLevel(Enum):
    """Уровни серьезности логов"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSection(Enum):
    """Основные разделы системы"""
    QUESTION = "question"
    ANSWER = "answer"
    USER = "user"
    COMMENT = "comment"
    DATABASE = "database"
    SYSTEM = "system"
    API = "api"


class LogSubsection:
    """Подразделы для каждого раздела"""

    # QUESTION подразделы
    class QUESTION:
        LIST = "list"
        UPSERT = "upsert"
        BATCH = "batch"
        VALIDATION = "validation"
        SEED = "seed"
        ERROR = "error"

    # ANSWER подразделы
    class ANSWER:
        SUBMIT = "submit"
        VALIDATION = "validation"
        ERROR = "error"

    # USER подразделы
    class USER:
        STATS = "stats"
        SCORE_UPDATE = "score_update"
        ERROR = "error"

    # COMMENT подразделы
    class COMMENT:
        CREATE = "create"
        UPDATE = "update"
        VALIDATION = "validation"
        ERROR = "error"

    # DATABASE подразделы
    class DATABASE:
        CONNECTION = "connection"
        INDEXES_CREATE = "indexes_create"
        INDEXES_SUCCESS = "indexes_success"
        INDEXES_ERROR = "indexes_error"
        QUERY = "query"
        ERROR = "error"

    # SYSTEM подразделы
    class SYSTEM:
        INITIALIZATION = "initialization"
        STARTUP = "startup"
        SHUTDOWN = "shutdown"
        ERROR = "error"

    # API подразделы
    class API:
        REQUEST = "request"
        ERROR = "error"
        VALIDATION = "validation"


class StructuredLogEntry:
    """Модель структурированного лог-сообщения"""

    def __init__(
        self,
        level: LogLevel,
        section: LogSection,
        subsection: str,
        message: str,
        extra_data: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        # Часовой пояс берём из окружения, по умолчанию UTC
        tz = pytz.timezone(os.getenv("LOG_TIMEZONE", "UTC"))

        self.timestamp = datetime.now(tz).strftime('%Y-%m-%d %H:%M:%S %Z')
        self.log_id = str(uuid.uuid4())[:8]  # Короткий уникальный ID
        self.level = level.value
        self.section = section.value
        self.subsection = subsection
        self.message = message
        self.extra_data = extra_data or {}
        self.user_id = user_id
        self.ip_address = ip_address
        self.user_agent = user_agent

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь для логирования"""
        log_dict = {
            "timestamp": self.timestamp,
            "log_id": self.log_id,
            "level": self.level,
            "section": self.section,
            "subsection": self.subsection,
            "message": self.message
        }

        # Добавляем опциональные поля если они есть
        if self.user_id:
            log_dict["user_id"] = self.user_id
        if self.ip_address:
            log_dict["ip_address"] = self.ip_address
        if self.user_agent:
            log_dict["user_agent"] = self.user_agent
        if self.extra_data:
            log_dict["extra_data"] = self.extra_data

        return log_dict

    def to_json_string(self) -> str:
        """Преобразование в JSON строку"""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)
