"""Suno webhook payload models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SunoCallbackData(BaseModel):
    """The ``data`` object of a Suno callback."""

    model_config = ConfigDict(extra="allow")

    callback_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("callbackType", "callback_type"))
    task_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("task_id", "taskId"))
    items: Optional[List[Dict[str, Any]]] = Field(default=None, validation_alias=AliasChoices("data", "items"))
    lyrics_data: Optional[List[Dict[str, Any]]] = Field(
        default=None, validation_alias=AliasChoices("lyricsData", "lyrics_data")
    )


class SunoCallback(BaseModel):
    """Body Suno POSTs to the callback URL: ``{code, msg, data}``."""

    model_config = ConfigDict(extra="allow")

    code: int = 200
    msg: str = ""
    data: SunoCallbackData = Field(default_factory=SunoCallbackData)
