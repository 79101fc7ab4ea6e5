"""
FastAPI/ASGI application entrypoint.

Build and configure the ASGI app; mount routes from server.
Run with: uvicorn ethnode_api.api_server.app:app --host 0.0.0.0 --port 3030
"""

from ethnode_api.api_server.server import app, create_app

__all__ = ["app", "create_app"]
