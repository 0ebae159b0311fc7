# app/services/quiz_service.py

"""
Операции над вопросами, ответами, статистикой и комментариями.

Все функции принимают хэндл базы первым аргументом и ничего не
хранят между вызовами. Ошибки - из app.core.exceptions; ошибки
драйвера (PyMongoError) пробрасываются наверх, их переводят в
StoreError роутеры.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument, DESCENDING

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.logging import get_logger, LogSection, LogSubsection
from app.schemas.question_schemas import QuestionCreate

logger = get_logger("quiz.service")

NO_EXPLANATION = "No explanation available"


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def parse_limit(raw: Any) -> int:
    """Нечисловой или отсутствующий limit - значение по умолчанию, иначе зажимаем в [1, MAX]"""
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return settings.DEFAULT_QUESTIONS_LIMIT
    return max(1, min(limit, settings.MAX_QUESTIONS_LIMIT))


def parse_is_ruf(raw: Any) -> Optional[bool]:
    """Значение заголовка/флага is_ruf: "true" в любом регистре - True, иначе False"""
    if raw is None:
        return None
    return str(raw).strip().lower() == "true"


def build_question_filter(
    subject: Optional[str] = None,
    topic: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> Dict[str, str]:
    filters = {}
    if subject:
        filters["subject"] = subject
    if topic:
        filters["topic"] = topic
    if difficulty:
        filters["difficulty"] = difficulty
    return filters


def to_object_id(question_id: str) -> ObjectId:
    try:
        return ObjectId(question_id)
    except (InvalidId, TypeError):
        raise NotFoundError("Вопрос не найден", details={"question_id": question_id})


def serialize_question(doc: dict) -> Dict[str, Any]:
    """Документ MongoDB -> JSON-совместимый словарь (ObjectId в строку)"""
    data = dict(doc)
    data["_id"] = str(doc["_id"])
    return data


def _format_validation_error(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ())) or "payload"
        message = err.get("msg", "Некорректное значение")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{field}: {message}")
    return "; ".join(parts)


async def _get_question(db, question_id: str) -> dict:
    question = await db.questions.find_one({"_id": to_object_id(question_id)})
    if not question:
        raise NotFoundError("Вопрос не найден", details={"question_id": question_id})
    return question


# ---------------------------------------------------------------------------
# Вопросы
# ---------------------------------------------------------------------------

async def list_questions(
    db,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
    difficulty: Optional[str] = None,
    limit: Any = None,
) -> List[Dict[str, Any]]:
    """Вопросы по фильтру, сначала самые новые"""
    filters = build_question_filter(subject, topic, difficulty)
    max_limit = parse_limit(limit)

    questions = await db.questions.find(
        filters,
        sort=[("created_at", DESCENDING), ("_id", DESCENDING)],
        limit=max_limit,
    ).to_list(length=max_limit)

    logger.debug(
        section=LogSection.QUESTION,
        subsection=LogSubsection.QUESTION.LIST,
        message=f"Выдано вопросов: {len(questions)} (фильтр {filters}, limit {max_limit})"
    )
    return [serialize_question(q) for q in questions]


async def upsert_question(db, payload: QuestionCreate, is_ruf: bool) -> Dict[str, Any]:
    """
    Создаёт вопрос или перезаписывает поля существующего с тем же question_text.

    Перезаписываются только присланные поля; comments и created_at
    выставляются лишь при создании.
    """
    # exclude_unset в v2 срезает и вложенные дефолты (is_correct у вариантов),
    # поэтому присланные поля отбираем только на верхнем уровне
    fields = {
        key: value
        for key, value in payload.model_dump().items()
        if key in payload.model_fields_set and not (key == "explanation" and value is None)
    }
    fields["is_ruf"] = is_ruf

    on_insert = {"created_at": datetime.utcnow(), "comments": []}
    for key, default in (("difficulty", ""), ("options", [])):
        if key not in fields:
            on_insert[key] = default

    doc = await db.questions.find_one_and_update(
        {"question_text": payload.question_text},
        {"$set": fields, "$setOnInsert": on_insert},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

    logger.info(
        section=LogSection.QUESTION,
        subsection=LogSubsection.QUESTION.UPSERT,
        message=f"Вопрос сохранён: {doc['_id']} (is_ruf={is_ruf})"
    )
    return serialize_question(doc)


async def upsert_questions(
    db,
    payload: Union[dict, list],
    is_ruf: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Принимает один вопрос или массив. Элементы применяются по очереди:
    невалидный элемент пропускается и попадает в errors, ошибка базы
    прерывает весь пакет.
    """
    if is_ruf is None:
        is_ruf = settings.DEFAULT_IS_RUF

    if isinstance(payload, dict):
        items = [payload]
    elif isinstance(payload, list):
        items = payload
    else:
        raise ValidationError("Ожидается объект вопроса или массив вопросов")

    questions = []
    errors = []
    for index, item in enumerate(items):
        try:
            if not isinstance(item, dict):
                raise ValidationError("Элемент должен быть объектом")
            question_in = QuestionCreate.model_validate(item)
        except PydanticValidationError as e:
            errors.append({"index": index, "message": _format_validation_error(e)})
            continue
        except ValidationError as e:
            errors.append({"index": index, "message": e.message})
            continue

        questions.append(await upsert_question(db, question_in, is_ruf))

    if errors:
        logger.warning(
            section=LogSection.QUESTION,
            subsection=LogSubsection.QUESTION.VALIDATION,
            message=f"Пропущено невалидных вопросов: {len(errors)} из {len(items)}",
            extra_data={"errors": errors}
        )

    if not questions:
        message = errors[0]["message"] if len(errors) == 1 else "Ни один вопрос не прошёл проверку"
        raise ValidationError(message, details={"errors": errors})

    return {"count": len(questions), "questions": questions, "errors": errors}


# ---------------------------------------------------------------------------
# Ответы и статистика
# ---------------------------------------------------------------------------

async def record_attempt(db, user_id: str, is_correct: bool) -> None:
    """Атомарный инкремент счётчиков; пользователь создаётся при первом ответе"""
    await db.users.find_one_and_update(
        {"_id": user_id},
        {
            "$inc": {"total_score": 1 if is_correct else 0, "total_attempts": 1},
            "$setOnInsert": {"username": user_id, "weak_topics": []},
        },
        upsert=True,
    )
    logger.debug(
        section=LogSection.USER,
        subsection=LogSubsection.USER.SCORE_UPDATE,
        message=f"Счёт пользователя {user_id} обновлён (верно: {is_correct})",
        user_id=user_id
    )


async def submit_answer(
    db,
    question_id: str,
    selected_option_index: int,
    user_id: Optional[str] = None,
) -> Dict[str, Any]:
    question = await _get_question(db, question_id)
    options = question.get("options") or []

    if not 0 <= selected_option_index < len(options):
        raise ValidationError(
            "Некорректный индекс варианта ответа",
            details={"selected_option_index": selected_option_index, "options_count": len(options)}
        )

    correct_option = next((opt for opt in options if opt.get("is_correct")), None)
    if correct_option is None:
        raise ValidationError(
            "У вопроса нет правильного варианта ответа",
            details={"question_id": question_id}
        )

    is_correct = bool(options[selected_option_index].get("is_correct"))

    if user_id:
        await record_attempt(db, user_id, is_correct)

    logger.info(
        section=LogSection.ANSWER,
        subsection=LogSubsection.ANSWER.SUBMIT,
        message=f"Ответ на вопрос {question_id}: {'верно' if is_correct else 'неверно'}",
        user_id=user_id or None
    )

    return {
        "is_correct": is_correct,
        "explanation": question.get("explanation") or NO_EXPLANATION,
        "correct_answer": correct_option.get("text", ""),
    }


async def get_user_stats(db, user_id: str) -> Dict[str, Any]:
    user = await db.users.find_one({"_id": user_id})
    if not user:
        return {"user_id": user_id, "total_score": 0, "total_attempts": 0, "weak_topics": []}

    return {
        "user_id": user_id,
        "total_score": user.get("total_score", 0),
        "total_attempts": user.get("total_attempts", 0),
        "weak_topics": user.get("weak_topics") or [],
    }


# ---------------------------------------------------------------------------
# Комментарии
# ---------------------------------------------------------------------------

async def upsert_comment(db, question_id: str, user_id: Optional[str], text: str) -> bool:
    """
    Один комментарий на пользователя: повторный комментарий заменяет
    text и updated_at существующего. Возвращает True, если комментарий новый.
    """
    if not text or not text.strip():
        raise ValidationError("Комментарий не может быть пустым")

    user_id = user_id or settings.DEFAULT_COMMENT_USER_ID
    question = await _get_question(db, question_id)

    comments = question.get("comments") or []
    now = datetime.utcnow()

    existing = next((c for c in comments if c.get("user_id") == user_id), None)
    if existing is not None:
        existing["text"] = text
        existing["updated_at"] = now
    else:
        comments.append({
            "user_id": user_id,
            "text": text,
            "created_at": now,
            "updated_at": now,
        })
    question["comments"] = comments

    await db.questions.replace_one({"_id": question["_id"]}, question)

    logger.info(
        section=LogSection.COMMENT,
        subsection=LogSubsection.COMMENT.UPDATE if existing is not None else LogSubsection.COMMENT.CREATE,
        message=f"Комментарий к вопросу {question_id} сохранён",
        user_id=user_id
    )
    return existing is None
