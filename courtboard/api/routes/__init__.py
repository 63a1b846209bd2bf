"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter) lives here; every sub-router imports what it
needs from this package.
"""

import os

from fastapi import APIRouter
from slowapi import Limiter
from slowapi.util import get_remote_address

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
if IS_TEST_ENV:
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

WRITE_RATE_LIMIT = os.getenv("WRITE_RATE_LIMIT", "60/minute")

# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from courtboard.api.routes.players import router as players_router  # noqa: E402
from courtboard.api.routes.courts import router as courts_router  # noqa: E402
from courtboard.api.routes.matches import router as matches_router  # noqa: E402
from courtboard.api.routes.events import router as events_router  # noqa: E402
from courtboard.api.routes.leaderboard import router as leaderboard_router  # noqa: E402
from courtboard.api.routes.assets import router as assets_router  # noqa: E402

router = APIRouter()
router.include_router(players_router)
router.include_router(courts_router)
router.include_router(matches_router)
router.include_router(events_router)
router.include_router(leaderboard_router)
router.include_router(assets_router)
