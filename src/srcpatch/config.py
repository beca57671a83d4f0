import os
import shlex

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    gofmt_command: list[str] = Field(default_factory=lambda: ["gofmt"], min_length=1)
    format_timeout: float = Field(default=30.0, gt=0)
    file_separator: str = "-"


def get_settings() -> Settings:
    """Build settings from ``SRCPATCH_*`` environment variables."""
    return Settings(
        gofmt_command=shlex.split(os.getenv("SRCPATCH_GOFMT", "gofmt")),
        format_timeout=os.getenv("SRCPATCH_FORMAT_TIMEOUT", "30"),  # type: ignore[arg-type]
        file_separator=os.getenv("SRCPATCH_FILE_SEPARATOR", "-"),
    )
