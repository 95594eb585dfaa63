"""HTTP API: FastAPI application factory and routes."""

from guardreport.api.server import create_app

__all__ = ["create_app"]
