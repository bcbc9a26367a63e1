# Infrastructure Adapters Package
from .memory_repository import InMemoryLearnerRepository, InMemoryScheduleRepository

__all__ = ["InMemoryLearnerRepository", "InMemoryScheduleRepository"]
