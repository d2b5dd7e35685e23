import tornado.web

from relay.services import ConnectionRegistry


class HealthHandler(tornado.web.RequestHandler):
    def initialize(self, registry: ConnectionRegistry):
        self.registry = registry

    def get(self):
        self.write({"status": "ok", "connections": len(self.registry)})
