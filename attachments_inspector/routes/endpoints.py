"""
REST Endpoint Registry

Aggregates the REST endpoints contributed by the plugin components and
mounts them under the API namespace. ``flush()`` rebuilds the mounted
routes from the current table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, FastAPI
from starlette.routing import BaseRoute

logger = logging.getLogger(__name__)


@dataclass
class EndpointSpec:
    """
    One REST endpoint contributed by a component.

    Attributes:
        route:          Path relative to the namespace, e.g.
                        "/attachments-report/get/{post_id}".
        endpoint:       FastAPI handler.
        methods:        HTTP methods.
        permission:     Dependency guarding the route; None means public.
        response_model: Response schema.
        name:           Route name used by ``url_path_for``.
    """

    route: str
    endpoint: Callable[..., Any]
    methods: list[str] = field(default_factory=lambda: ["GET"])
    permission: Callable[..., Any] | None = None
    response_model: Any = None
    name: str | None = None
    summary: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def is_public(self) -> bool:
        return self.permission is None


class EndpointRegistry:
    """Table of REST endpoints mounted under one namespace."""

    def __init__(self, namespace: str) -> None:
        self.namespace = "/" + namespace.strip("/") if namespace.strip("/") else ""
        self._endpoints: list[EndpointSpec] = []
        self._app: FastAPI | None = None
        self._mounted: list[BaseRoute] = []

    # ── Registration ──────────────────────────────────────────────────────────

    def add(self, spec: EndpointSpec) -> None:
        for existing in self._endpoints:
            if existing.route == spec.route and set(existing.methods) & set(spec.methods):
                raise ValueError(f"Endpoint already registered: {spec.methods} {spec.route}")
        self._endpoints.append(spec)
        logger.debug("Endpoint registered: %s %s%s", ",".join(spec.methods), self.namespace, spec.route)

    def extend(self, specs: Iterable[EndpointSpec]) -> None:
        for spec in specs:
            self.add(spec)

    def endpoints(self) -> list[EndpointSpec]:
        return list(self._endpoints)

    # ── Mounting ──────────────────────────────────────────────────────────────

    def _add_routes(self, app: FastAPI) -> None:
        # Routes are added one by one so they can later be removed by identity
        for spec in self._endpoints:
            before = {id(route) for route in app.router.routes}
            app.router.add_api_route(
                f"{self.namespace}{spec.route}",
                spec.endpoint,
                methods=spec.methods,
                dependencies=[Depends(spec.permission)] if spec.permission else None,
                response_model=spec.response_model,
                name=spec.name,
                summary=spec.summary,
                tags=spec.tags or None,
            )
            self._mounted.extend(route for route in app.router.routes if id(route) not in before)

    def mount(self, app: FastAPI) -> None:
        """Mount the endpoint table on ``app``."""
        self._app = app
        self._mounted = []
        self._add_routes(app)
        app.openapi_schema = None
        logger.info("Mounted %d endpoints under %s", len(self._endpoints), self.namespace or "/")

    def flush(self) -> int:
        """
        Rebuild the mounted routes from the endpoint table.

        Returns:
            Number of endpoints mounted after the flush (0 when not mounted).
        """
        if self._app is None:
            logger.debug("Endpoint table not mounted yet, nothing to flush")
            return 0
        mounted = {id(route) for route in self._mounted}
        self._app.router.routes[:] = [route for route in self._app.router.routes if id(route) not in mounted]
        self.mount(self._app)
        return len(self._endpoints)
