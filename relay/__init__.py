"""
Telemetry relay service package.

This service is responsible for:
- Accepting WebSocket connections from sensor boards and dashboards.
- Normalizing raw IMU readings into the dashboard schema.
- Broadcasting every frame to all connected peers.
- Evicting peers that stop answering heartbeat pings.

The HTTP/WebSocket server is implemented with Tornado.
"""
