"""
Shared test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during tests. Tests control config exclusively through monkeypatch.setenv()
or explicit settings objects.
"""

import pytest

from fakes import make_order


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def orders():
    return [
        make_order(1, "Ada Lovelace", product="Analytical Engine"),
        make_order(2, "Grace Brewster Hopper", product="Compiler"),
        make_order(3, "Linus", product="Kernel"),
    ]
