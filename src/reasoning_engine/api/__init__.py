"""HTTP API for running reasoning sessions and analyzing plans."""

from reasoning_engine.api.routes import router

__all__ = ["router"]
