"""
Location and transit lookup for schedule items.

LookupService asks the configured model for a titled link; LookupTracker
runs one cancellable lookup per item and merges results into the plan.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from ..config import Settings, settings as default_settings
from ..models.plan import GroundingLink
from ..models.store import PlanStore
from .external_tools import ExternalToolsService
from .llm_client import LLMClient
from .schedule import find_item, update_item_in_plan

logger = logging.getLogger(__name__)

TRANSIT_TITLE_LIMIT = 50


class LookupKind(str, Enum):
    """What a lookup resolves for an item."""
    LOCATION = "location"
    TRANSIT = "transit"


LOCATION_SYSTEM_PROMPT = """You find places for a travel itinerary.
Given an activity and a destination, find the exact place name and its official map link.

Return ONLY valid JSON:
{"title": "Exact place name", "uri": "https://maps.google.com/..."}

If you cannot identify the place, return {}."""


TRANSIT_SYSTEM_PROMPT = """You find public transit routes for a travel itinerary.
Given an activity and a destination, summarize the most common transit method
(e.g. "JR Kobe Line") and give a link to a real-time transit guide such as
Jorudan or Google Maps Transit.

Return ONLY valid JSON:
{"title": "Short route summary", "uri": "https://..."}

If you cannot find a route, return {}."""


def summarize_transit(text: str) -> str:
    """First line of a route description, cut to a short label."""
    lines = text.strip().splitlines()
    first_line = lines[0].strip() if lines else ""
    if len(first_line) > TRANSIT_TITLE_LIMIT:
        return first_line[:TRANSIT_TITLE_LIMIT] + "..."
    return first_line


def _to_link(data: dict) -> Optional[GroundingLink]:
    """Accept a lookup reply only if it carries a title and an http(s) link."""
    title = data.get("title")
    uri = data.get("uri")
    if not isinstance(title, str) or not isinstance(uri, str):
        return None
    title, uri = title.strip(), uri.strip()
    if not title or not uri.startswith(("http://", "https://")):
        return None
    return GroundingLink(title=title, uri=uri)


class LookupService:
    """Resolves an activity to a location or transit link; never raises on failure."""

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        tools: Optional[ExternalToolsService] = None,
        config: Optional[Settings] = None
    ):
        config = config or default_settings
        self.llm = llm or LLMClient(config)
        self.tools = tools or ExternalToolsService(config)
        self.osm_fallback = config.osm_fallback

    def _messages(self, system_prompt: str, kind: LookupKind, activity: str, destination: str) -> list[dict]:
        return [
            {"role": "system", "content": system_prompt},
            {
                "role": "user",
                "content": f"Lookup: {kind.value}\nActivity: {activity}\nDestination: {destination}"
            },
        ]

    async def _ask(self, system_prompt: str, kind: LookupKind, activity: str, destination: str) -> Optional[GroundingLink]:
        try:
            data = await self.llm.chat_json(self._messages(system_prompt, kind, activity, destination))
        except Exception as e:
            logger.error(f"{kind.value.capitalize()} lookup error for {activity!r}: {e}")
            return None
        return _to_link(data)

    async def lookup_location(self, activity: str, destination: str) -> Optional[GroundingLink]:
        """Find the place name and map link for an activity."""
        if not activity.strip():
            return None
        link = await self._ask(LOCATION_SYSTEM_PROMPT, LookupKind.LOCATION, activity, destination)
        if link is None and self.osm_fallback:
            link = await self._osm_location(activity, destination)
        if link is None:
            logger.info(f"No location found for {activity!r} in {destination}")
        return link

    async def lookup_transit(self, activity: str, destination: str) -> Optional[GroundingLink]:
        """Find a transit route summary and guide link for an activity."""
        if not activity.strip():
            return None
        link = await self._ask(TRANSIT_SYSTEM_PROMPT, LookupKind.TRANSIT, activity, destination)
        if link is None:
            logger.info(f"No transit route found for {activity!r} in {destination}")
            return None
        return link.model_copy(update={"title": summarize_transit(link.title)})

    async def _osm_location(self, activity: str, destination: str) -> Optional[GroundingLink]:
        places = await self.tools.get_osm_places(f"{activity}, {destination}", limit=1)
        if not places or not isinstance(places[0], dict):
            return None
        place = places[0]
        title = place.get("name") or place.get("display_name")
        uri = self.tools.osm_link(place)
        return _to_link({"title": title, "uri": uri})


def _lookup_fields(kind: LookupKind, link: GroundingLink) -> dict:
    if kind == LookupKind.LOCATION:
        return {"location": link.title, "location_url": link.uri}
    return {"transit_detail": link.title, "transit_url": link.uri}


class LookupTracker:
    """
    Runs lookups as asyncio tasks keyed by (kind, item id).

    Lookups for different items are independent. Starting a lookup for
    a key that is already in flight cancels the older one.
    """

    def __init__(self, service: LookupService):
        self.service = service
        self._tasks: dict[tuple[LookupKind, str], asyncio.Task] = {}

    def in_flight(self, kind: Optional[LookupKind] = None) -> list[str]:
        """Item ids with a running lookup."""
        return [
            item_id for (task_kind, item_id), task in self._tasks.items()
            if not task.done() and (kind is None or task_kind == kind)
        ]

    def cancel(self, item_id: str, kind: Optional[LookupKind] = None) -> bool:
        """Cancel running lookups for an item. Returns True if any was cancelled."""
        cancelled = False
        for (task_kind, task_item_id), task in list(self._tasks.items()):
            if task_item_id == item_id and (kind is None or task_kind == kind) and not task.done():
                task.cancel()
                cancelled = True
        return cancelled

    async def run(self, store: PlanStore, day_id: str, item_id: str, kind: LookupKind) -> bool:
        """
        Look up an item and merge the result into the store's plan.

        Returns:
            True if the item was updated; False if nothing was found,
            the lookup was cancelled, or the item no longer exists
        """
        kind = LookupKind(kind)
        plan = store.require_plan()
        item = find_item(plan, day_id, item_id)
        if item is None:
            return False

        key = (kind, item_id)
        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            previous.cancel()

        if kind == LookupKind.LOCATION:
            lookup = self.service.lookup_location(item.activity, plan.destination)
        else:
            lookup = self.service.lookup_transit(item.activity, plan.destination)
        task = asyncio.create_task(lookup)
        self._tasks[key] = task

        try:
            link = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info(f"{kind.value.capitalize()} lookup for item {item_id} cancelled")
            return False
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]

        if link is None:
            return False
        return self._merge(store, plan.id, day_id, item_id, kind, link)

    def _merge(
        self,
        store: PlanStore,
        plan_id: str,
        day_id: str,
        item_id: str,
        kind: LookupKind,
        link: GroundingLink
    ) -> bool:
        current = store.plan
        if current is None or current.id != plan_id or find_item(current, day_id, item_id) is None:
            logger.debug(f"Dropping {kind.value} result for removed item {item_id}")
            return False
        store.apply(update_item_in_plan, day_id, item_id, _lookup_fields(kind, link))
        return True
