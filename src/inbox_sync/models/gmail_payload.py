"""Typed view of the Gmail message payloads consumed by the sync.

Gmail returns loosely-typed JSON. These models validate it once, at the
boundary, so the rest of the package never touches raw dictionaries. Only the
message id is required; every other field falls back to an empty default.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRef(BaseModel):
    """An entry of the users.messages.list response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1, description="Gmail message ID")
    thread_id: str = Field(default="", alias="threadId", description="Gmail thread ID")


class MessageHeader(BaseModel):
    """A single name/value header pair."""

    name: str
    value: str


class MessagePayload(BaseModel):
    """The `payload` part of a format=metadata message."""

    model_config = ConfigDict(extra="ignore")

    headers: list[MessageHeader] = Field(default_factory=list)

    @field_validator("headers", mode="before")
    @classmethod
    def _drop_malformed_headers(cls, v: Any) -> list[dict[str, str]]:
        if not isinstance(v, list):
            return []
        return [
            {"name": h["name"], "value": h["value"]}
            for h in v
            if isinstance(h, dict) and isinstance(h.get("name"), str) and isinstance(h.get("value"), str)
        ]


class MessageDetail(BaseModel):
    """A users.messages.get response requested with format=metadata."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1, description="Gmail message ID")
    thread_id: str = Field(default="", alias="threadId", description="Gmail thread ID")
    snippet: str = Field(default="", description="Provider preview text")
    label_ids: list[str] | None = Field(default=None, alias="labelIds", description="Gmail label IDs")
    payload: MessagePayload = Field(default_factory=MessagePayload)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("thread_id", "snippet", mode="before")
    @classmethod
    def _empty_if_not_string(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("label_ids", mode="before")
    @classmethod
    def _keep_string_labels(cls, v: Any) -> list[str] | None:
        if not isinstance(v, list):
            return None
        return [x for x in v if isinstance(x, str)]

    @field_validator("payload", mode="before")
    @classmethod
    def _empty_payload_if_missing(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @property
    def headers(self) -> list[MessageHeader]:
        return self.payload.headers
