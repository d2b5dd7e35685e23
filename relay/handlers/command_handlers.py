import json
import logging
from typing import Any, Dict

import tornado.web
from pydantic import ValidationError

from relay.models import CalibrateRequest, PidRequest
from relay.services import ControllerSink

logger = logging.getLogger(__name__)


class CommandHandler(tornado.web.RequestHandler):
    """Shared plumbing for the JSON command endpoints."""

    def initialize(self, controller_sink: ControllerSink):
        self.controller_sink = controller_sink

    def reply(self, status: int, body: Dict[str, Any]) -> None:
        self.set_status(status)
        self.set_header("Content-Type", "application/json")
        self.finish(json.dumps(body))


class CalibrateHandler(CommandHandler):
    async def post(self):
        try:
            payload = json.loads(self.request.body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            logger.exception("Calibration error")
            return self.reply(500, {"error": "Calibration failed"})

        try:
            request = CalibrateRequest.model_validate(payload)
        except ValidationError as exc:
            fields = {error["loc"][0] for error in exc.errors() if error["loc"]}
            if fields == {"duration_ms"}:
                return self.reply(400, {"error": "Invalid calibration duration"})
            return self.reply(400, {"error": "No axis specified"})

        try:
            await self.controller_sink.calibrate(request.axis, request.duration_ms)
        except Exception:
            logger.exception("Calibration error")
            return self.reply(500, {"error": "Calibration failed"})
        self.reply(200, {"status": "success", "axis": request.axis})


class PidHandler(CommandHandler):
    async def post(self):
        try:
            payload = json.loads(self.request.body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            logger.exception("PID update error")
            return self.reply(500, {"error": "PID update failed"})

        try:
            request = PidRequest.model_validate(payload)
        except ValidationError:
            return self.reply(400, {"error": "Missing PID values"})

        try:
            await self.controller_sink.apply_pid(request.p, request.i, request.d)
        except Exception:
            logger.exception("PID update error")
            return self.reply(500, {"error": "PID update failed"})
        self.reply(200, {"status": "PID updated", **request.model_dump()})
