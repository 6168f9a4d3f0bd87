"""
Immutable per-request context.

Built once from the incoming Starlette request and threaded explicitly
through the auth gate, the router and the handlers.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from starlette.requests import Request


def _freeze(values: Optional[Mapping[str, str]], lower_keys: bool = False) -> Mapping[str, str]:
    items = dict(values or {})
    if lower_keys:
        items = {key.lower(): value for key, value in items.items()}
    return MappingProxyType(items)


@dataclass(frozen=True)
class RequestContext:
    """Method, path, headers, query parameters and raw body of one request."""
    method: str
    raw_path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    client_ip: Optional[str] = None

    @classmethod
    def build(
        cls,
        method: str,
        raw_path: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        client_ip: Optional[str] = None,
    ) -> "RequestContext":
        return cls(
            method=method.upper(),
            raw_path=raw_path,
            headers=_freeze(headers, lower_keys=True),
            query=_freeze(query),
            body=body or b"",
            client_ip=client_ip,
        )

    @classmethod
    async def from_request(cls, request: Request) -> "RequestContext":
        raw_path = request.url.path
        if request.url.query:
            raw_path = f"{raw_path}?{request.url.query}"

        return cls.build(
            method=request.method,
            raw_path=raw_path,
            headers=dict(request.headers),
            query=dict(request.query_params),
            body=await request.body(),
            client_ip=request.client.host if request.client else None,
        )

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.query.get(name, default)

    def json_body(self) -> Optional[Dict[str, Any]]:
        """Decoded JSON object body, or None when absent, malformed or not an object."""
        if not self.body:
            return None
        try:
            decoded = json.loads(self.body)
        except (ValueError, UnicodeDecodeError):
            return None
        return decoded if isinstance(decoded, dict) else None
