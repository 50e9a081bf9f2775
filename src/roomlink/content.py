"""Read-only browsing of saved playlists and radio favourites."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING
from xml.etree import ElementTree

from roomlink.utils.lookup import rough_match
from roomlink.models import Favourite, Playlist

if TYPE_CHECKING:
    from roomlink.core.directory import Controller

logger = logging.getLogger(__name__)

BROWSE_LIMIT = 100


def browse(controller: Controller, object_id: str) -> str:
    result = controller.soap(
        "ContentDirectory",
        "Browse",
        {
            "ObjectID": object_id,
            "BrowseFlag": "BrowseDirectChildren",
            "Filter": "*",
            "StartingIndex": 0,
            "RequestedCount": BROWSE_LIMIT,
            "SortCriteria": "",
        },
    )
    return result.get("Result", "")


def _didl_elements(didl: str, tag: str) -> list[ElementTree.Element]:
    if not didl:
        return []
    try:
        root = ElementTree.fromstring(didl)
    except ElementTree.ParseError as exc:
        logger.warning("Could not parse browse result: %s", exc)
        return []
    return root.findall(f"{{*}}{tag}")


def _title(element: ElementTree.Element) -> str:
    return (element.findtext("{*}title") or "").strip()


def parse_playlists(didl: str) -> list[Playlist]:
    playlists = []
    for container in _didl_elements(didl, "container"):
        playlist_id = container.get("id")
        if not playlist_id:
            continue
        playlists.append(Playlist(id=playlist_id, name=_title(container)))
    return playlists


def parse_favourites(didl: str, tag: str) -> list[Favourite]:
    favourites = []
    for element in _didl_elements(didl, tag):
        uri = (element.findtext("{*}res") or "").strip()
        favourites.append(Favourite(name=_title(element), uri=uri))
    return favourites


def list_playlists(controller: Controller) -> list[Playlist]:
    return parse_playlists(browse(controller, "SQ:"))


class FavouriteKind(IntEnum):
    STATIONS = 0
    SHOWS = 1


class Radio:
    """Favourite radio stations and shows saved on the network."""

    def __init__(self, controller: Controller) -> None:
        self._controller = controller

    def _favourites(self, kind: FavouriteKind) -> list[Favourite]:
        tag = "item" if kind is FavouriteKind.STATIONS else "container"
        return parse_favourites(browse(self._controller, f"R:0/{kind.value}"), tag)

    def favourite_stations(self) -> list[Favourite]:
        return self._favourites(FavouriteKind.STATIONS)

    def favourite_station(self, name: str) -> Favourite | None:
        return rough_match(self.favourite_stations(), name, lambda item: item.name)

    def favourite_shows(self) -> list[Favourite]:
        return self._favourites(FavouriteKind.SHOWS)

    def favourite_show(self, name: str) -> Favourite | None:
        return rough_match(self.favourite_shows(), name, lambda item: item.name)
