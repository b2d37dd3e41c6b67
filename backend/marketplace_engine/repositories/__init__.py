"""
Repository layer for data access.

Repositories hide how entities are stored from the engine services.
"""
from marketplace_engine.repositories.base import Repository
from marketplace_engine.repositories.memory import InMemoryRepository

__all__ = [
    "Repository",
    "InMemoryRepository",
]
