"""Per-source-calendar mirroring settings."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Visibility(str, Enum):
    """Visibility applied to mirrored events."""

    DEFAULT = "default"
    PUBLIC = "public"
    PRIVATE = "private"


class SourceConfig(BaseModel):
    """
    How events of one source calendar are shaped on the primary calendar.

    ``title_prefix`` has three states. Leaving the key out selects the
    default ``[calendar_id]`` prefix, an explicit ``None`` disables the
    prefix, and a string is used as the prefix.
    """

    calendar_id: str
    color_id: Optional[str] = Field(None, alias="colorId")
    title_prefix: Optional[str] = Field(None, alias="titlePrefix")
    summary: Optional[str] = None
    copy_description: bool = Field(False, alias="copyDescription")
    visibility: Optional[Visibility] = None

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    @field_validator("color_id", mode="before")
    @classmethod
    def _color_id_as_string(cls, value: Any) -> Any:
        # YAML reads `color_id: 9` as an int
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def uses_default_prefix(self) -> bool:
        """True when ``title_prefix`` was never given."""
        return "title_prefix" not in self.model_fields_set
