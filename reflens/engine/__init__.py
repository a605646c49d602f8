from reflens.engine.base import BrowserEngine
from reflens.engine.connection import ConnectionManager
from reflens.engine.playwright import PlaywrightEngine

__all__ = ["BrowserEngine", "ConnectionManager", "PlaywrightEngine"]
