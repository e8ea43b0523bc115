from .memory_repository import MemoryRepository
from .repository import ExistenceChecker, SessionRepository
from .sql_repository import SQLRepository

__all__ = ["ExistenceChecker", "MemoryRepository", "SQLRepository", "SessionRepository"]
