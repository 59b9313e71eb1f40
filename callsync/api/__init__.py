"""Upstream API clients.

Usage:
    from callsync.api import GongClient, VelarisClient

    async with GongClient(api_key) as gong, VelarisClient(token) as velaris:
        call = await gong.get_call("123")
        await velaris.create_activity({...})
"""

from .gong import GongClient, format_gong_datetime
from .velaris import VelarisClient

__all__ = ["GongClient", "VelarisClient", "format_gong_datetime"]
