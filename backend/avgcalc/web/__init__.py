"""Web layer: aiohttp application and server lifecycle."""

from avgcalc.web.server import NumberServer, StartupError, create_app

__all__ = [
    "NumberServer",
    "StartupError",
    "create_app",
]
