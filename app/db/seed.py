"""
Демо-вопросы для пустой базы
"""
from datetime import datetime

from app.logging import get_logger, LogSection, LogSubsection

logger = get_logger("database_seed")

SAMPLE_QUESTIONS = [
    {
        "question_text": "jQuery kis language ki library hai?",
        "subject": "Web Development",
        "topic": "jQuery",
        "options": [
            {"text": "JavaScript", "is_correct": True},
            {"text": "Python", "is_correct": False},
            {"text": "PHP", "is_correct": False},
            {"text": "C++", "is_correct": False},
        ],
        "explanation": "jQuery JavaScript ki lightweight library hai",
    },
    {
        "question_text": "Rajasthan ka capital kya hai?",
        "subject": "Rajasthan GK",
        "topic": "Geography",
        "options": [
            {"text": "Delhi", "is_correct": False},
            {"text": "Jaipur", "is_correct": True},
            {"text": "Jodhpur", "is_correct": False},
            {"text": "Udaipur", "is_correct": False},
        ],
    },
    {
        "question_text": "C++ me class ka keyword kya hai?",
        "subject": "Programming",
        "topic": "C++",
        "options": [
            {"text": "struct", "is_correct": False},
            {"text": "class", "is_correct": True},
            {"text": "object", "is_correct": False},
            {"text": "function", "is_correct": False},
        ],
    },
]


async def seed_sample_questions(db) -> int:
    """Добавляет демо-вопросы, только если коллекция questions пуста"""
    count = await db.questions.count_documents({})
    if count > 0:
        return 0

    now = datetime.utcnow()
    documents = [
        {
            "difficulty": "",
            "comments": [],
            "is_ruf": True,
            "created_at": now,
            **sample,
        }
        for sample in SAMPLE_QUESTIONS
    ]
    await db.questions.insert_many(documents)

    logger.info(
        section=LogSection.QUESTION,
        subsection=LogSubsection.QUESTION.SEED,
        message=f"Добавлено демо-вопросов: {len(documents)}"
    )
    return len(documents)
