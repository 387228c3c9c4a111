"""
External Tools Service.
Handles place searches against OpenStreetMap (Nominatim).
"""
import httpx
from typing import List, Dict, Optional
import logging

from ..config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
OSM_BASE_URL = "https://www.openstreetmap.org"


class ExternalToolsService:
    """Service to interact with external map APIs."""

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        config = config or default_settings
        # Nominatim requires a user-agent
        self.headers = {"User-Agent": config.user_agent}
        self.timeout = config.lookup_timeout_seconds
        self.transport = transport

    async def get_osm_places(self, query: str, limit: int = 5) -> List[Dict]:
        """
        Search for places using OpenStreetMap (Nominatim).
        """
        params = {
            "q": query,
            "format": "json",
            "limit": limit
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(NOMINATIM_URL, params=params, headers=self.headers)
                response.raise_for_status()
                data = response.json()
                return data if isinstance(data, list) else []
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"OSM Error: {e}")
                return []

    @staticmethod
    def osm_link(place: Dict) -> Optional[str]:
        """Build the openstreetmap.org page link for a Nominatim result."""
        osm_type = place.get("osm_type")
        osm_id = place.get("osm_id")
        if osm_type and osm_id:
            return f"{OSM_BASE_URL}/{osm_type}/{osm_id}"
        lat, lon = place.get("lat"), place.get("lon")
        if lat and lon:
            return f"{OSM_BASE_URL}/?mlat={lat}&mlon={lon}#map=17/{lat}/{lon}"
        return None
