from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from app.core.exceptions import QuizError, StoreError
from app.db.database import get_database
from app.logging import get_logger, LogSection, LogSubsection
from app.schemas.user_schemas import UserStats
from app.services import quiz_service

logger = get_logger("quiz.users")
router = APIRouter(tags=["users"])


@router.get("/user/{user_id}/stats", response_model=UserStats)
async def get_user_stats(user_id: str, db=Depends(get_database)):
    try:
        stats = await quiz_service.get_user_stats(db, user_id)
    except QuizError:
        raise
    except PyMongoError as e:
        logger.error(
            section=LogSection.USER,
            subsection=LogSubsection.USER.ERROR,
            message=f"Ошибка при получении статистики пользователя: {str(e)}",
            user_id=user_id
        )
        raise StoreError(str(e))

    return UserStats(**stats)
