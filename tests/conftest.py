"""Shared models and fixtures for the publicview test-suite."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, List, Optional

import pytest
from pydantic import BaseModel, Field

from publicview.engine.descriptors import exposed, hidden
from publicview.service.pipeline import ResponseService


@dataclass
class Profile:
    field_visible: str = ""
    field_hidden_value: str = hidden(default="")
    field_hidden: str = hidden(default="", metadata={"omitempty": True})


@dataclass
class Message:
    field_visible: str = ""
    field_hidden_value: str = hidden(default="")
    field_hidden: str = hidden(default="", metadata={"omitempty": True})


@dataclass
class Sample:
    id: int = 0
    name: str = ""
    password: str = hidden(default="", metadata={"omitempty": True})
    registered: Optional[datetime] = None
    ptr: Optional[Profile] = exposed(name="profile_ptr", default=None)
    if_struct: Any = exposed(name="profile_as_interface_struct", default=None)
    if_ptr: Any = exposed(name="profile_as_interface_ptr", default=None)
    profile: Profile = field(default_factory=Profile)
    msgs: List[Message] = exposed(name="messages", default_factory=list)


@dataclass
class User:
    id: str
    name: str
    password: str = ""
    avatar: str = ""

    def public_view(self) -> "User":
        return replace(self, password="", avatar="//origin/" + self.avatar)


@dataclass
class Node:
    name: str
    next: Optional["Node"] = None


class Account(BaseModel):
    login: str
    display: str = Field(default="", serialization_alias="displayName")
    api_token: str = Field(default="", exclude=True)
    secret: str = Field(default="", json_schema_extra={"out": False})


HIDDEN = "should be hidden and omitted"
REGISTERED = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


def make_sample() -> Sample:
    """The reference value: every field kind, every nesting path."""
    return Sample(
        id=1,
        name="foo",
        password=HIDDEN,
        registered=REGISTERED,
        ptr=Profile(field_visible="xxx", field_hidden_value="zxc", field_hidden=HIDDEN),
        if_ptr=Profile(field_visible="yyy", field_hidden_value="", field_hidden=HIDDEN),
        if_struct=Profile(field_visible="vvv", field_hidden_value="", field_hidden=HIDDEN),
        profile=Profile(field_visible="ccc", field_hidden_value="", field_hidden=HIDDEN),
        msgs=[
            Message(field_visible="123", field_hidden_value="", field_hidden=HIDDEN),
            Message(field_visible="345", field_hidden_value="", field_hidden=HIDDEN),
        ],
    )


def decode_sample(data: dict) -> Sample:
    """Decodes a JSON object into a fresh Sample, leaving absent fields zero."""

    def profile(d: Optional[dict]) -> Optional[Profile]:
        return Profile(**d) if d is not None else None

    registered = data.get("registered")
    return Sample(
        id=data.get("id", 0),
        name=data.get("name", ""),
        password=data.get("password", ""),
        registered=datetime.fromisoformat(registered) if registered else None,
        ptr=profile(data.get("profile_ptr")),
        if_struct=profile(data.get("profile_as_interface_struct")),
        if_ptr=profile(data.get("profile_as_interface_ptr")),
        profile=profile(data.get("profile", {})),
        msgs=[Message(**m) for m in data.get("messages", [])],
    )


@pytest.fixture()
def sample() -> Sample:
    return make_sample()


@pytest.fixture(autouse=True)
def _reset_service():
    """Each test builds its own service singleton from its own settings."""
    ResponseService.reset()
    yield
    ResponseService.reset()


@pytest.fixture(autouse=True)
def _silence_logging(caplog):
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield
