from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STATEMENT_")

    # Names that may appear as cardholder banner rows or in a card column.
    cardholders: List[str] = ["Rahul", "Ritu"]
    # Assigned to rows before any cardholder banner is seen. Defaults to the
    # first entry of ``cardholders`` when unset.
    default_cardholder: Optional[str] = None

    log_level: str = "INFO"

    @field_validator("cardholders")
    @classmethod
    def _non_empty(cls, value: List[str]) -> List[str]:
        names = [v.strip() for v in value if v and v.strip()]
        if not names:
            raise ValueError("at least one cardholder is required")
        return names

    @property
    def default_holder(self) -> str:
        return self.default_cardholder or self.cardholders[0]


@lru_cache
def get_settings() -> Settings:
    return Settings()
