"""Request routing logic."""

import logging
from dataclasses import dataclass
from typing import Callable

from tinyhttpd.bootstrap.config import (
    ECHO_PREFIX,
    FILES_PREFIX,
    INDEX_PATH,
    USER_AGENT_PATH,
)
from tinyhttpd.domain.connection_id import get_logger
from tinyhttpd.domain.file_store import FileStore
from tinyhttpd.domain.http_types import HttpRequest, Method, NotFound, RouteOutcome
from tinyhttpd.handlers.file_handler import serve_file, store_file
from tinyhttpd.handlers.system_handlers import (
    handle_echo,
    handle_index,
    handle_user_agent,
)

ROUTER_LOGGER = get_logger("tinyhttpd.pipeline.router")

Handler = Callable[[HttpRequest, FileStore], RouteOutcome]


@dataclass(frozen=True)
class Route:
    """One route table entry; ``prefix`` selects prefix over exact matching."""

    method: Method
    pattern: str
    handler: Handler
    prefix: bool = False

    def matches(self, request: HttpRequest) -> bool:
        if request.method is not self.method:
            return False
        if self.prefix:
            return request.target.startswith(self.pattern)
        return request.target == self.pattern

    @property
    def label(self) -> str:
        return f"{self.method.value} {self.pattern}{'*' if self.prefix else ''}"


ROUTES: tuple[Route, ...] = (
    Route(Method.GET, ECHO_PREFIX, handle_echo, prefix=True),
    Route(Method.GET, FILES_PREFIX, serve_file, prefix=True),
    Route(Method.POST, FILES_PREFIX, store_file, prefix=True),
    Route(Method.GET, USER_AGENT_PATH, handle_user_agent),
    Route(Method.GET, INDEX_PATH, handle_index),
)


def route_request(
    request: HttpRequest, store: FileStore, routes: tuple[Route, ...] = ROUTES
) -> RouteOutcome:
    """Dispatch to the first matching route, or report NotFound."""
    for route in routes:
        if route.matches(request):
            if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
                ROUTER_LOGGER.debug(
                    "Route matched",
                    extra={"event": "route_matched", "route": route.label},
                )
            return route.handler(request, store)

    ROUTER_LOGGER.info(
        "No matching route found",
        extra={
            "event": "route_not_found",
            "route": request.target,
            "method": request.method_token,
        },
    )
    return NotFound()
