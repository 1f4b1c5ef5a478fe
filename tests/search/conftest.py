"""Shared fixtures for search tests."""

from __future__ import annotations

import pytest

from routeplane.index import ControllerDescriptor, RouteDescriptor


def make_route(method: str, full_path: str, owner: str = "CatsController") -> RouteDescriptor:
    return RouteDescriptor(
        http_method=method,
        declared_path=full_path,
        full_path=full_path,
        source_file=f"/ws/{owner}.ts",
        line=1,
        column=0,
        owner_name=owner,
        handler_name="handler",
    )


@pytest.fixture
def controllers() -> tuple[ControllerDescriptor, ...]:
    cats = ControllerDescriptor(
        "CatsController",
        "cats",
        "/ws/CatsController.ts",
        (make_route("GET", "/cats"), make_route("GET", "/cats/:id"), make_route("POST", "/cats")),
    )
    users = ControllerDescriptor(
        "UsersController",
        "users",
        "/ws/UsersController.ts",
        (
            make_route("GET", "/users/:userId", "UsersController"),
            make_route("GET", "/users/:userId/posts/:postId", "UsersController"),
        ),
    )
    health = ControllerDescriptor(
        "HealthController",
        "health",
        "/ws/HealthController.ts",
        (make_route("GET", "/health", "HealthController"),),
    )
    return (cats, users, health)


@pytest.fixture
def routes(controllers: tuple[ControllerDescriptor, ...]) -> tuple[RouteDescriptor, ...]:
    return tuple(r for c in controllers for r in c.routes)
