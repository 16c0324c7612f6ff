"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and common response definitions for API routes.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    USER = RouteConfig(prefix="/users", tag="users")
    HEALTH = RouteConfig(prefix="/health", tag="health")


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {"description": "Validation failed; `errors` lists every violation"}
    }
    NOT_FOUND: dict[int, dict[str, Any]] = {404: {"description": "User not found"}}
    CONFLICT: dict[int, dict[str, Any]] = {
        409: {"description": "Email already registered"}
    }
