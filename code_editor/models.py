# code_editor/models.py
from __future__ import annotations
from enum import Enum
from typing import NamedTuple, Optional
from pydantic import BaseModel, ConfigDict, Field


class ActionType(str, Enum):
    READ = "read"
    WRITE = "write"


class EditableFile(BaseModel):
    """
    One file as the studio sends it. Built per request, validated once, then
    either handed to storage or discarded.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field(..., description="File type tag, e.g. 'hook' or 'bot_config'")
    name: str = Field("", description="Human filename")
    location: str = Field("", description="Path relative to the type's folder")
    content: Optional[str] = Field(None, description="Raw text payload (empty on reads)")
    bot_id: Optional[str] = Field(None, alias="botId", description="Owning bot, empty for global files")
    hook_type: Optional[str] = Field(None, alias="hookType", description="Hook folder for hook files")

    @property
    def is_scoped(self) -> bool:
        return bool(self.bot_id)


class FileLocation(NamedTuple):
    folder: str
    filename: str
