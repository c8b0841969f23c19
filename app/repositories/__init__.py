from app.repositories.base import Repository
from app.repositories.sql import SqlRepository
from app.repositories.local import JsonFileRepository

__all__ = ["Repository", "SqlRepository", "JsonFileRepository"]
