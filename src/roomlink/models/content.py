from __future__ import annotations

from pydantic import BaseModel


class Playlist(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str


class Favourite(BaseModel):
    """A saved radio station or show."""

    model_config = {"frozen": True}

    name: str
    uri: str
