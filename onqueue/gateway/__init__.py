"""HTTP gateway for enqueueing and listing tasks."""

from onqueue.gateway.server import GatewayServer

__all__ = ["GatewayServer"]
