from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from app.core.exceptions import QuizError, StoreError
from app.db.database import get_database
from app.logging import get_logger, LogSection, LogSubsection
from app.schemas.answer_schemas import AnswerResult, AnswerSubmit
from app.services import quiz_service

logger = get_logger("quiz.answers")
router = APIRouter(tags=["answers"])


@router.post("/answers", response_model=AnswerResult)
async def submit_answer(body: AnswerSubmit, db=Depends(get_database)):
    """Проверка ответа; при наличии user_id обновляется его счёт"""
    try:
        result = await quiz_service.submit_answer(
            db,
            question_id=body.question_id,
            selected_option_index=body.selected_option_index,
            user_id=body.credited_user_id(),
        )
    except QuizError:
        raise
    except PyMongoError as e:
        logger.error(
            section=LogSection.ANSWER,
            subsection=LogSubsection.ANSWER.ERROR,
            message=f"Ошибка при проверке ответа на вопрос {body.question_id}: {str(e)}",
            user_id=body.user_id
        )
        raise StoreError(str(e))

    return AnswerResult(**result)
