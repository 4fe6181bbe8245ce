"""Pydantic models for the PD members API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PDBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MemberPayload(PDBaseModel):
    name: str | None = None


class MembersResponse(PDBaseModel):
    members: list[MemberPayload]

    @property
    def names(self) -> list[str]:
        return [member.name for member in self.members if member.name]
