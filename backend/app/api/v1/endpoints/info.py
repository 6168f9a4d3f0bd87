"""
API information endpoint (exempt from the API key check).
"""

from backend.app.core.config import Settings
from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply, local_timestamp
from backend.app.core.router import RequestRouter


class InfoController:
    """Describes the API and its documented routes."""

    def __init__(self, app_settings: Settings, router: RequestRouter):
        self.settings = app_settings
        self.router = router

    async def show(self, context: RequestContext) -> Reply:
        """GET /info"""
        return Reply.ok({
            "api_name": self.settings.app_name,
            "version": self.settings.api_version,
            "timestamp": local_timestamp(self.settings.timezone),
            "endpoints": self.router.describe(),
        })
