"""Структурированные логи."""

import json
import logging

from app.logging import get_logger, LogLevel, LogSection, LogSubsection, StructuredLogEntry
from app.logging.logger_setup import StructuredFormatter


class TestStructuredLogEntry:

    def test_to_dict_skips_empty_optional_fields(self):
        entry = StructuredLogEntry(
            level=LogLevel.INFO,
            section=LogSection.QUESTION,
            subsection=LogSubsection.QUESTION.UPSERT,
            message="saved",
        )

        data = entry.to_dict()

        assert data["level"] == "INFO"
        assert data["section"] == "question"
        assert data["subsection"] == "upsert"
        assert len(data["log_id"]) == 8
        assert "user_id" not in data
        assert "extra_data" not in data

    def test_to_json_string(self):
        entry = StructuredLogEntry(
            level=LogLevel.WARNING,
            section=LogSection.COMMENT,
            subsection=LogSubsection.COMMENT.VALIDATION,
            message="пустой комментарий",
            user_id="u1",
        )

        data = json.loads(entry.to_json_string())

        assert data["message"] == "пустой комментарий"
        assert data["user_id"] == "u1"


class TestStructuredLogger:

    def test_caller_info_is_recorded(self):
        logger = get_logger("tests.logging")

        entry = logger.info(
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.STARTUP,
            message="hello",
            extra_data={"answer": 42},
        )

        assert entry.extra_data["answer"] == 42
        assert entry.extra_data["source_file"] == "test_logging.py"
        assert entry.extra_data["source_function"] == "test_caller_info_is_recorded"

    def test_records_reach_handlers_as_json(self, caplog):
        logger = get_logger("tests.logging.caplog")

        with caplog.at_level(logging.WARNING, logger="tests.logging.caplog"):
            logger.warning(
                section=LogSection.ANSWER,
                subsection=LogSubsection.ANSWER.VALIDATION,
                message="bad index",
            )

        assert len(caplog.records) == 1
        formatted = json.loads(StructuredFormatter().format(caplog.records[0]))
        assert formatted["section"] == "answer"
        assert formatted["message"] == "bad index"

    def test_plain_records_are_wrapped(self):
        record = logging.LogRecord("plain", logging.ERROR, __file__, 1, "boom", (), None)

        formatted = json.loads(StructuredFormatter().format(record))

        assert formatted["level"] == "ERROR"
        assert formatted["section"] == "system"
        assert formatted["extra_data"]["module"] == "plain"


class TestRabbitMQHandler:

    def test_lock_is_not_created_outside_event_loop(self):
        from app.logging.rabbitmq_handler import RabbitMQHandler, RabbitMQLogPublisher

        handler = RabbitMQHandler()
        publisher = RabbitMQLogPublisher()

        assert handler.connection._lock is None
        assert publisher.connection._lock is None

    def test_info_entries_are_not_shipped(self):
        import asyncio
        from app.logging.rabbitmq_handler import RabbitMQLogPublisher

        entry = StructuredLogEntry(
            level=LogLevel.INFO,
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.STARTUP,
            message="not shipped",
        )

        assert asyncio.run(RabbitMQLogPublisher().publish_log(entry)) is False
