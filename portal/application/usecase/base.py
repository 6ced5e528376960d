"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class CallerInfo(BaseModel):
    """Authenticated user on whose behalf a use case runs."""

    sub: str  # authentik user uid
    username: str
    display_name: str | None = None
    email: str | None = None
    groups: list[str] = Field(default_factory=list)


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass
