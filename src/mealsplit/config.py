from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mealsplit.models import OutputFormat, SplitMode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MEALSPLIT_",
        case_sensitive=False,
        extra="ignore",
    )

    output_format: OutputFormat = Field(OutputFormat.JSON)
    mode: SplitMode = Field(SplitMode.AUTO)
    result_suffix: str = Field("-result")
    write_bom: bool = Field(True)
    strict: bool = Field(False)
    log_level: str = Field("INFO")
    json_indent: int = Field(2, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
