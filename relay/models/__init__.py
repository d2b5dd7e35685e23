"""Pydantic models for relay WebSocket and HTTP message schemas."""

from .messages import (
    INERTIAL_KEYS,
    CalibrateCommand,
    CalibrateRequest,
    ImuMessage,
    ImuReading,
    PidCommand,
    PidRequest,
    SchemaDocument,
)

__all__ = [
    "INERTIAL_KEYS",
    "CalibrateCommand",
    "CalibrateRequest",
    "ImuMessage",
    "ImuReading",
    "PidCommand",
    "PidRequest",
    "SchemaDocument",
]
