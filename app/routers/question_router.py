from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from pymongo.errors import PyMongoError

from app.core.exceptions import QuizError, StoreError
from app.db.database import get_database
from app.logging import get_logger, LogSection, LogSubsection
from app.schemas.question_schemas import CommentSaved, CommentUpsert, QuestionsUpserted
from app.services import quiz_service

logger = get_logger("quiz.questions")
router = APIRouter(tags=["questions"])


@router.get("/questions", response_model=List[Dict[str, Any]])
async def list_questions(
    subject: Optional[str] = Query(None),
    topic: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db=Depends(get_database)
):
    """Вопросы по предмету/теме/сложности, сначала новые; limit от 1 до 100 (по умолчанию 20)"""
    try:
        return await quiz_service.list_questions(
            db, subject=subject, topic=topic, difficulty=difficulty, limit=limit
        )
    except QuizError:
        raise
    except PyMongoError as e:
        logger.error(
            section=LogSection.QUESTION,
            subsection=LogSubsection.QUESTION.ERROR,
            message=f"Ошибка при получении вопросов: {str(e)}"
        )
        raise StoreError(str(e))


@router.post("/questions", response_model=QuestionsUpserted)
async def create_or_upsert_questions(
    request: Request,
    payload: Any = Body(...),
    is_ruf: Optional[str] = Query(None),
    db=Depends(get_database)
):
    """
    Создание или обновление вопросов (один объект или массив).

    Совпадение по question_text - обновление полей, иначе новый вопрос.
    is_ruf берётся из заголовка is_ruf, затем из query-флага, иначе true.
    """
    raw_is_ruf = request.headers.get("is_ruf", is_ruf)

    try:
        result = await quiz_service.upsert_questions(
            db, payload, is_ruf=quiz_service.parse_is_ruf(raw_is_ruf)
        )
    except QuizError:
        raise
    except PyMongoError as e:
        logger.error(
            section=LogSection.QUESTION,
            subsection=LogSubsection.QUESTION.ERROR,
            message=f"Ошибка при сохранении вопросов: {str(e)}"
        )
        raise StoreError(str(e))

    logger.info(
        section=LogSection.QUESTION,
        subsection=LogSubsection.QUESTION.BATCH,
        message=f"Сохранено вопросов: {result['count']}, отклонено: {len(result['errors'])}",
        ip_address=request.client.host if request.client else None
    )

    return QuestionsUpserted(
        inserted_or_updated=result["count"],
        questions=result["questions"],
        errors=result["errors"],
    )


@router.put("/questions/{question_id}/comment", response_model=CommentSaved)
async def upsert_comment(
    question_id: str,
    body: CommentUpsert,
    db=Depends(get_database)
):
    """Добавить комментарий или обновить свой (один комментарий на пользователя)"""
    try:
        created = await quiz_service.upsert_comment(db, question_id, body.user_id, body.comment)
    except QuizError:
        raise
    except PyMongoError as e:
        logger.error(
            section=LogSection.COMMENT,
            subsection=LogSubsection.COMMENT.ERROR,
            message=f"Ошибка при сохранении комментария к вопросу {question_id}: {str(e)}"
        )
        raise StoreError(str(e))

    message = "Комментарий успешно добавлен" if created else "Комментарий успешно обновлён"
    return CommentSaved(message=message)
