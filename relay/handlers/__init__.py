from .health_handler import HealthHandler
from .docs_handler import DocsHandler
from .relay_ws_handler import RelayWebSocketHandler
from .command_handlers import CalibrateHandler, PidHandler

__all__ = [
    "HealthHandler",
    "DocsHandler",
    "RelayWebSocketHandler",
    "CalibrateHandler",
    "PidHandler",
]
