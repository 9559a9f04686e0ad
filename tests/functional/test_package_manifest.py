"""Functional tests: the default registry as a whole.

Every dependency edge declared by a registered package must point at a
library some registered package provides, and the unit tests of every
package must link the libraries they test.
"""

import pytest

from chistogram.manifest import default_registry

# pylint: disable=redefined-outer-name


@pytest.fixture
def registry():
    """The registry shipped with chistogram."""
    return default_registry()


def test_every_provider_is_registered(registry):
    provided = {
        lib.name
        for name in registry.names()
        for lib in registry.resolve(name).get_main_lib()
    }
    for name in registry.names():
        for _, provider in registry.resolve(name).dependency_edges():
            assert provider in provided


def test_sub_packages_are_registered_versions(registry):
    for name in registry.names():
        for sub in registry.resolve(name).packages:
            assert registry.resolve(sub.name) == sub


def test_dependency_graph_is_acyclic(registry):
    graph = {
        project.name: set(project.dependency_names)
        for name in registry.names()
        for project in registry.resolve(name).projects
    }
    visiting, done = set(), set()

    def visit(node):
        assert node not in visiting, f"cycle through {node}"
        if node in done:
            return
        visiting.add(node)
        for provider in graph.get(node, ()):
            visit(provider)
        visiting.discard(node)
        done.add(node)

    for node in graph:
        visit(node)
    assert "chistogram_test" in done


def test_chistogram_test_closure(registry):
    package = registry.resolve("chistogram")
    (unittest,) = package.get_unittest()
    assert set(unittest.dependency_names) == {"cunittest", "cfile", "cbase", "chistogram"}
    (mainlib,) = package.get_main_lib()
    assert set(mainlib.dependency_names) == {"cfile", "cbase"}
