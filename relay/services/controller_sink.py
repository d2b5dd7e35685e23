import logging
from abc import ABC, abstractmethod
from typing import Optional

from relay.models import CalibrateCommand, PidCommand
from relay.services.broadcaster import Broadcaster
from relay.services.normalizer import Frame

logger = logging.getLogger(__name__)


class ControllerSink(ABC):
    """Destination for calibration and PID commands issued over HTTP."""

    @abstractmethod
    async def calibrate(self, axis: str, duration_ms: Optional[int] = None) -> CalibrateCommand:
        raise NotImplementedError

    @abstractmethod
    async def apply_pid(self, p: float, i: float, d: float) -> PidCommand:
        raise NotImplementedError


class RelayControllerSink(ControllerSink):
    """
    Forwards commands to the controller through the relay itself.

    The boards listen on the same socket as the dashboards, so a command is
    just another broadcast frame in the dashboard command vocabulary.
    """

    def __init__(self, broadcaster: Broadcaster):
        self.broadcaster = broadcaster

    async def calibrate(self, axis: str, duration_ms: Optional[int] = None) -> CalibrateCommand:
        command = CalibrateCommand(type=axis, duration_ms=duration_ms)
        self._send(command.model_dump_json(exclude_none=True))
        return command

    async def apply_pid(self, p: float, i: float, d: float) -> PidCommand:
        command = PidCommand(p=p, i=i, d=d)
        self._send(command.model_dump_json())
        return command

    def _send(self, payload: str) -> None:
        sent = self.broadcaster.broadcast(Frame(payload))
        if sent == 0:
            logger.warning(f"No controller connected; command dropped: {payload}")
        else:
            logger.info(f"Relayed command to {sent} client(s): {payload}")
