"""Tag directory."""

import logging
from typing import Protocol

from hwsync.inventory.api import ExtrasAPI
from hwsync.inventory.base import call_upstream, exactly_one
from hwsync.inventory.models import InventoryTag
from hwsync.inventory.requests import ListTagsRequest

logger = logging.getLogger(__name__)


class Extras(Protocol):
    def get_tag_by_name(self, name: str) -> InventoryTag: ...


class ExtrasService:
    def __init__(self, api: ExtrasAPI) -> None:
        self.api = api

    def get_tag_by_name(self, name: str) -> InventoryTag:
        query = ListTagsRequest(name=name).build()
        logger.debug(f"list tags: {query}")
        res = call_upstream(f"unable to list tags by name {name}", self.api.list_tags, query)
        return exactly_one(res, f"unexpected number of tags found by name {name}")
