"""
Request router and dispatcher.

Routes are matched strictly in registration order: the first entry whose
method and pattern match the normalized path wins, with no specificity
ranking. Register literal routes before generic patterns that could
shadow them.
"""

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Pattern

from backend.app.core.auth import AuthGate
from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply
from backend.app.core.exceptions import (
    AppException,
    InternalServerError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger("mkauth_api.router")

Handler = Callable[..., Awaitable[Reply]]

# "{name}" is shorthand for one capturing path segment
_PLACEHOLDER = re.compile(r"\{[A-Za-z_][A-Za-z0-9_]*\}")
_SEGMENT = "([^/]+)"


def compile_pattern(pattern: str) -> Pattern:
    return re.compile(_PLACEHOLDER.sub(_SEGMENT, pattern))


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    regex: Pattern
    handler: Handler
    description: Optional[str] = None


class RequestRouter:
    """
    Ordered (method, pattern, handler) table with auth gating.

    Handlers are awaited as ``handler(context, *captured_groups)`` and must
    return a Reply.
    """

    def __init__(
        self,
        auth_gate: AuthGate,
        base_path: str = "",
        exempt_paths: Iterable[str] = (),
        expose_error_details: bool = False,
    ):
        self.auth_gate = auth_gate
        self.base_path = base_path.rstrip("/")
        self.exempt_paths = frozenset(exempt_paths)
        self.expose_error_details = expose_error_details
        self.routes: List[Route] = []

    def register(self, method: str, pattern: str, handler: Handler, description: Optional[str] = None) -> None:
        self.routes.append(
            Route(
                method=method.upper(),
                pattern=pattern,
                regex=compile_pattern(pattern),
                handler=handler,
                description=description,
            )
        )

    def describe(self) -> Dict[str, str]:
        """Documented routes as {"METHOD /full/path": description}."""
        return {
            f"{route.method} {self.base_path}{route.pattern}": route.description
            for route in self.routes
            if route.description
        }

    def normalize_path(self, raw_path: str) -> str:
        """Drop the query string and base prefix; collapse one trailing slash."""
        path = raw_path.split("?", 1)[0] or "/"

        base = self.base_path
        if base and (path == base or path.startswith(base + "/")):
            path = path[len(base):]

        if not path.startswith("/"):
            path = "/" + path
        if len(path) > 1 and path.endswith("/"):
            path = path[:-1]
        return path

    async def dispatch(self, context: RequestContext) -> Reply:
        """
        Produce exactly one reply for the request.

        Order: OPTIONS bypass, path normalization, API key check (unless the
        path is exempt), first matching route, 404 when nothing matched.
        """
        if context.method == "OPTIONS":
            return Reply.blank()

        path = self.normalize_path(context.raw_path)

        if path not in self.exempt_paths and not self.auth_gate.validate(context):
            logger.warning("Rejected API key for %s %s", context.method, path)
            return Reply.failure(UnauthorizedError())

        for route in self.routes:
            if route.method != context.method:
                continue
            match = route.regex.fullmatch(path)
            if match is None:
                continue
            return await self._invoke(route, context, match.groups())

        return Reply.failure(NotFoundError("Endpoint not found"))

    async def _invoke(self, route: Route, context: RequestContext, params) -> Reply:
        try:
            return await route.handler(context, *params)
        except AppException as exc:
            return Reply.failure(exc)
        except Exception as exc:
            logger.exception("Unhandled error in %s %s", route.method, route.pattern)
            message = "Internal server error"
            if self.expose_error_details:
                message = f"{message}: {type(exc).__name__}: {exc}"
            return Reply.failure(InternalServerError(message))
