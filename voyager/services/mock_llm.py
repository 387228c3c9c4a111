"""
Mock LLM Client - Offline lookup provider.
Answers location and transit prompts with deterministic Google Maps links,
so the planner works without an API key.
"""
import json
import logging
import re
from typing import Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/"
MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


class MockLLMClient:
    """
    Offline stand-in for a chat model.
    Reads the 'Activity:', 'Destination:' and 'Lookup:' lines of the prompt.
    """

    def __init__(self):
        self.model = "mock-lookup"

    def _read_line(self, text: str, label: str) -> str:
        match = re.search(rf"^{label}:\s*(.+)$", text, re.MULTILINE)
        return match.group(1).strip() if match else ""

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False
    ) -> str:
        """Answer a lookup prompt."""
        user_msg = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        activity = self._read_line(user_msg, "Activity")
        destination = self._read_line(user_msg, "Destination")
        kind = self._read_line(user_msg, "Lookup").lower()

        if not activity:
            logger.debug("Mock lookup without activity, returning empty result")
            return json.dumps({})

        query = f"{activity} {destination}".strip()
        if kind == "transit":
            params = urlencode({"api": 1, "destination": query, "travelmode": "transit"})
            result = {
                "title": f"Public transit to {activity}",
                "uri": f"{MAPS_DIRECTIONS_URL}?{params}",
            }
        else:
            params = urlencode({"api": 1, "query": query})
            result = {
                "title": activity,
                "uri": f"{MAPS_SEARCH_URL}?{params}",
            }
        return json.dumps(result)
