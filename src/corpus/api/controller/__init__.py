"""HTTP controllers."""

from src.corpus.api.controller.documents_controller import router as documents_router

__all__ = ["documents_router"]
