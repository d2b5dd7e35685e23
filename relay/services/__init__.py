from .broadcaster import Broadcaster
from .controller_sink import ControllerSink, RelayControllerSink
from .heartbeat import DEFAULT_HEARTBEAT_INTERVAL, HeartbeatMonitor
from .normalizer import Frame, normalize_frame
from .registry import ConnectionRegistry, RelayConnection

__all__ = [
    "Broadcaster",
    "ConnectionRegistry",
    "ControllerSink",
    "DEFAULT_HEARTBEAT_INTERVAL",
    "Frame",
    "HeartbeatMonitor",
    "RelayConnection",
    "RelayControllerSink",
    "normalize_frame",
]
