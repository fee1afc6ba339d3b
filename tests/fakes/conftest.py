"""
Test Fixtures and Helpers for Fake Repositories.

This module provides helpers for overriding FastAPI dependencies with fake
implementations on an app built by create_app().

Usage:
    from tests.fakes.conftest import override_dependency

    app = create_app(settings=Settings(environment="test", _env_file=None))
    repo = override_dependency(app, get_nutrition_repo, FakeNutritionRepository())
"""

import inspect
from typing import Any, Callable

from fastapi import FastAPI

# Type for dependency getters
RepoGetter = Callable[..., Any]


def override_dependency(app: FastAPI, getter: RepoGetter, implementation: Any) -> Any:
    """
    Override a FastAPI dependency with a fake implementation.

    Args:
        app: Application to override on
        getter: The dependency getter function (e.g., get_nutrition_repo)
        implementation: The fake instance, or a factory function

    Returns:
        The implementation (for seeding data etc.)
    """
    if inspect.isfunction(implementation):
        app.dependency_overrides[getter] = implementation
    else:
        app.dependency_overrides[getter] = lambda: implementation
    return implementation
