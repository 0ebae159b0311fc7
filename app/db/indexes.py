"""
Инициализация индексов MongoDB
"""
from app.logging import get_logger, LogSection, LogSubsection
from pymongo import IndexModel, ASCENDING, DESCENDING

logger = get_logger("database_indexes")


async def create_database_indexes(db):
    logger.info(
        section=LogSection.DATABASE,
        subsection=LogSubsection.DATABASE.INDEXES_CREATE,
        message="Начинаем создание индексов базы данных"
    )

    try:
        # -------------------------
        # questions: question_text - естественный ключ для upsert
        await db.questions.create_indexes([
            IndexModel([("question_text", ASCENDING)], name="question_text_uniq", unique=True),
            IndexModel([("created_at", DESCENDING)], name="newest_first"),
            IndexModel(
                [("subject", ASCENDING), ("topic", ASCENDING), ("difficulty", ASCENDING)],
                name="by_subject_topic_difficulty"
            ),
        ])
        logger.info(section=LogSection.DATABASE,
                    subsection=LogSubsection.DATABASE.INDEXES_SUCCESS,
                    message="Индексы для коллекции questions созданы")

        # -------------------------
        # users: _id и есть идентификатор пользователя
        await db.users.create_indexes([
            IndexModel([("username", ASCENDING)], name="username_uniq", unique=True, sparse=True),
        ])
        logger.info(section=LogSection.DATABASE,
                    subsection=LogSubsection.DATABASE.INDEXES_SUCCESS,
                    message="Индексы для коллекции users созданы")

    except Exception as e:
        logger.error(
            section=LogSection.DATABASE,
            subsection=LogSubsection.DATABASE.INDEXES_ERROR,
            message=f"Ошибка при создании индексов: {str(e)}"
        )
        raise
