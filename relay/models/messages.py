from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]

INERTIAL_KEYS = ("ax", "ay", "az", "gx", "gy", "gz")


class ImuReading(BaseModel):
    """Inbound flat IMU reading from a sensor board -> relay."""

    model_config = ConfigDict(extra="allow")

    ax: float = Field(..., description="Acceleration along X.")
    ay: float = Field(..., description="Acceleration along Y.")
    az: float = Field(..., description="Acceleration along Z.")
    gx: float = Field(..., description="Angular rate around X.")
    gy: float = Field(..., description="Angular rate around Y.")
    gz: float = Field(..., description="Angular rate around Z.")
    roll: Optional[float] = Field(default=None, description="Fused roll estimate, if the board computes one.")
    pitch: Optional[float] = Field(default=None, description="Fused pitch estimate, if the board computes one.")
    yaw: Optional[float] = Field(default=None, description="Fused yaw estimate, if the board computes one.")


class ImuMessage(BaseModel):
    """Outbound canonical IMU message from relay -> dashboards."""

    type: Literal["imu"] = "imu"
    accel: List[Number] = Field(..., min_length=3, max_length=3, description="[ax, ay, az].")
    gyro: List[Number] = Field(..., min_length=3, max_length=3, description="[gx, gy, gz].")
    roll: Number = Field(default=0, description="Roll, 0 when the board did not send one.")
    pitch: Number = Field(default=0, description="Pitch, 0 when the board did not send one.")
    yaw: Number = Field(default=0, description="Yaw, 0 when the board did not send one.")


class CalibrateRequest(BaseModel):
    """Body of POST /api/calibrate."""

    axis: str = Field(..., min_length=1, description="Axis or sensor to calibrate, e.g. 'x'.")
    duration_ms: Optional[int] = Field(default=None, gt=0, description="Optional sampling window forwarded to the board.")


class PidRequest(BaseModel):
    """Body of POST /api/pid."""

    p: float = Field(..., description="Proportional gain.")
    i: float = Field(..., description="Integral gain.")
    d: float = Field(..., description="Derivative gain.")


class CalibrateCommand(BaseModel):
    """Calibration command relayed to the controller."""

    cmd: Literal["CAL_START"] = "CAL_START"
    type: str = Field(..., description="Calibration target.")
    duration_ms: Optional[int] = Field(default=None, description="Sampling window requested from the board.")


class PidCommand(BaseModel):
    """PID gains relayed to the motor controller."""

    cmd: Literal["SET_PID"] = "SET_PID"
    p: float
    i: float
    d: float


class SchemaDocument(BaseModel):
    """Documentation payload served at /docs for quick reference."""

    websocket_endpoints: Dict[str, str]
    http_endpoints: Dict[str, str]
    inbound_messages: Dict[str, Dict[str, Any]]
    outbound_messages: Dict[str, Dict[str, Any]]
    examples: Dict[str, Any] = Field(default_factory=dict)
    notes: List[str] = []
