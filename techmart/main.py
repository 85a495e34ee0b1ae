"""
Name: Backend ASGI Entrypoint (techmart.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing techmart.api.main

Notes/Constraints:
  - uvicorn is configured to import techmart.main:app
"""

from .api.main import app

__all__ = ["app"]
