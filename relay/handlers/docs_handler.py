import tornado.web

from relay.models import (
    CalibrateCommand,
    CalibrateRequest,
    ImuMessage,
    ImuReading,
    PidCommand,
    PidRequest,
    SchemaDocument,
)


class DocsHandler(tornado.web.RequestHandler):
    def get(self):
        imu_reading_example = {
            "ax": 0.02,
            "ay": -0.01,
            "az": 9.81,
            "gx": 0.4,
            "gy": -1.2,
            "gz": 0.0,
            "roll": 1.5,
        }

        imu_message_example = {
            "type": "imu",
            "accel": [0.02, -0.01, 9.81],
            "gyro": [0.4, -1.2, 0.0],
            "roll": 1.5,
            "pitch": 0,
            "yaw": 0,
        }

        schema = SchemaDocument(
            websocket_endpoints={
                "relay": "/",
                "relay_alias": "/ws",
            },
            http_endpoints={
                "health": "GET /health",
                "docs": "GET /docs",
                "calibrate": "POST /api/calibrate",
                "pid": "POST /api/pid",
            },
            inbound_messages={
                "ImuReading": ImuReading.model_json_schema(),
                "CalibrateRequest": CalibrateRequest.model_json_schema(),
                "PidRequest": PidRequest.model_json_schema(),
            },
            outbound_messages={
                "ImuMessage": ImuMessage.model_json_schema(),
                "CalibrateCommand": CalibrateCommand.model_json_schema(),
                "PidCommand": PidCommand.model_json_schema(),
            },
            examples={
                "imu_reading": imu_reading_example,
                "imu_message": imu_message_example,
            },
            notes=[
                "Every frame is broadcast to all connected clients, including the sender.",
                "Flat IMU readings (ax, ay, az, gx, gy, gz) are rewritten as ImuMessage.",
                "Other JSON objects are re-serialized unchanged; non-JSON text and binary frames pass through as-is.",
                "Clients that miss a heartbeat ping are disconnected after one to two intervals.",
            ],
        )
        self.set_header("Content-Type", "application/json")
        self.write(schema.model_dump(mode="json"))
