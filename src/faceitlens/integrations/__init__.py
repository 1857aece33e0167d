"""
FaceitLens Integrations - External service clients.

This module contains:
- faceit: FACEIT Data API client (player lookup, profile, stats)
- steam: Steam Web API client (vanity URL resolution)
"""

from faceitlens.integrations.faceit import FACEITClient
from faceitlens.integrations.steam import SteamClient

__all__ = ["FACEITClient", "SteamClient"]
