"""Web routes for Knowcards."""

from knowcards.web.routes.cards import router as cards_router
from knowcards.web.routes.site import router as site_router

__all__ = ["cards_router", "site_router"]
