# main.py

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.logging import setup_application_logging, get_logger, LogSection, LogSubsection, close_all_rabbitmq_connections
from app.core.config import settings
from app.core.exceptions import QuizError
from app.core.response import error
from app.routers import question_router, answer_router, user_router
from app.db.database import create_mongo_client, create_database_indexes, seed_sample_questions, get_database

# Инициализация структурированной системы логирования
setup_application_logging()
logger = get_logger("main")

# Создаём приложение
app = FastAPI(
    title="MCQ Quiz API",
    description="Вопросы с вариантами ответов, счёт пользователей и комментарии",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(question_router.router, prefix="/api")
app.include_router(answer_router.router, prefix="/api")
app.include_router(user_router.router, prefix="/api")


@app.exception_handler(QuizError)
async def quiz_exception_handler(request: Request, exc: QuizError):
    log = logger.error if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
    log(
        section=LogSection.API,
        subsection=LogSubsection.API.ERROR,
        message=f"{exc.__class__.__name__} {exc.status_code} для пути {request.url.path} (метод: {request.method}) - {exc.message}"
    )
    return error(code=exc.status_code, message=exc.message, details=exc.details)


@app.exception_handler(PyMongoError)
async def store_exception_handler(request: Request, exc: PyMongoError):
    logger.error(
        section=LogSection.DATABASE,
        subsection=LogSubsection.DATABASE.ERROR,
        message=f"Ошибка базы данных для пути {request.url.path}: {str(exc)}"
    )
    return error(code=HTTP_500_INTERNAL_SERVER_ERROR, message=str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    path = request.url.path
    code = exc.status_code

    logger.warning(
        section=LogSection.API,
        subsection=LogSubsection.API.ERROR,
        message=f"HTTP исключение {code} для пути {path} (метод: {request.method}) - {exc.detail}"
    )

    if code == HTTP_405_METHOD_NOT_ALLOWED:
        return error(code, "Метод не разрешён", details={"method": request.method, "path": path})
    if code == HTTP_404_NOT_FOUND:
        return error(code, "Страница не найдена", details={"path": path})
    if isinstance(exc.detail, str):
        return error(code=code, message=exc.detail, details={"path": path})
    return error(code=code, message="Ошибка запроса", details={"path": path})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error_list = []
    for err in exc.errors():
        field = err.get("loc", ["неизвестное поле"])[-1]
        message = err.get("msg", "Некорректное значение")
        # Удаляем префикс "Value error, " если он присутствует
        prefix = "Value error, "
        if message.startswith(prefix):
            message = message[len(prefix):]
        error_list.append({"field": field, "message": message})

    logger.warning(
        section=LogSection.API,
        subsection=LogSubsection.API.VALIDATION,
        message=f"Ошибка валидации запроса для пути {request.url.path} (метод: {request.method})"
    )

    formatted_error_details = "; ".join(
        [f"Поле «{item['field']}»: {item['message']}" for item in error_list]
    )
    return error(
        code=HTTP_400_BAD_REQUEST,
        message=formatted_error_details,
        details={"errors": error_list}
    )


INDEX_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>MCQ Quiz</title>
    <script src="https://code.jquery.com/jquery-3.7.1.min.js"></script>
</head>
<body>
    <h1>MCQ Quiz Loading...</h1>
    <div id="quiz"></div>
    <script>
        $.get('/api/questions?limit=10', function(data) {
            $('#quiz').html('Database connected! ' + data.length + ' questions ready');
        });
    </script>
</body>
</html>
"""


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index_page():
    return INDEX_PAGE


@app.get("/health")
async def health(db=Depends(get_database)):
    try:
        await db.command("ping")
        return {"ok": True}
    except Exception as e:
        return {"ok": False, "error": str(e)}


@app.on_event("startup")
async def startup_event():
    """Запускается при старте приложения"""
    logger.info(
        section=LogSection.SYSTEM,
        subsection=LogSubsection.SYSTEM.STARTUP,
        message="Запуск приложения"
    )

    app.state.mongo_client = create_mongo_client(settings.MONGO_URI)
    app.state.db = app.state.mongo_client[settings.MONGO_DB_NAME]

    # Создаем индексы базы данных
    try:
        await create_database_indexes(app.state.db)
    except Exception as e:
        logger.error(
            section=LogSection.SYSTEM,
            subsection=LogSubsection.SYSTEM.STARTUP,
            message=f"Ошибка при создании индексов базы данных: {str(e)}"
        )

    if settings.SEED_SAMPLE_QUESTIONS:
        try:
            await seed_sample_questions(app.state.db)
        except PyMongoError as e:
            logger.error(
                section=LogSection.SYSTEM,
                subsection=LogSubsection.SYSTEM.STARTUP,
                message=f"Ошибка при добавлении демо-вопросов: {str(e)}"
            )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(
        section=LogSection.SYSTEM,
        subsection=LogSubsection.SYSTEM.SHUTDOWN,
        message="Завершение работы приложения"
    )

    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()

    await close_all_rabbitmq_connections()
