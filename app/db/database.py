# app/db/database.py

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


def create_mongo_client(mongo_uri: str) -> AsyncIOMotorClient:
    """Клиент создаётся один раз при старте приложения (см. main.py)"""
    return AsyncIOMotorClient(mongo_uri, tz_aware=False)


# dependency для FastAPI: база лежит в app.state, в тестах подменяется
async def get_database(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


# Импорт функций инициализации коллекций
from .indexes import create_database_indexes
from .seed import seed_sample_questions
