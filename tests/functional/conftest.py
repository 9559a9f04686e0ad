"""Tests under `tests/functional/` are marked `functional` unless they say otherwise."""

from pathlib import Path

import pytest

from tests.helpers.markers import mark_items_under

# pylint: disable=unused-argument


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    mark_items_under(items, Path(__file__).parent.resolve(), "functional")
