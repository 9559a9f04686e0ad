"""Immutable package-manifest values.

A `Package` bundles a main library, optional test libraries and unit-test
projects, and references the sibling packages whose libraries it consumes.
Every `Project` lists the projects it depends on; those edges point from a
consumer to a provider and are declared top-down, so they cannot form cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import InvalidManifestError

DEFAULT_REPOSITORY_ROOT = "github.com\\jurgen-kluft"


def default_path(name: str) -> str:
    """Repository path used when a package is created without one."""
    return f"{DEFAULT_REPOSITORY_ROOT}\\{name}"


class ProjectKind(Enum):
    """Kinds of build projects a package can declare."""

    CPP_LIB = "cpp-lib"
    CPP_TEST = "cpp-test"


@dataclass(frozen=True, slots=True)
class Project:
    """A single build project (library or test executable).

    Conventions:
      - `name` is the project name, e.g. "chistogram" or "chistogram_test".
      - `path` is the repository path, e.g. "github.com\\jurgen-kluft\\chistogram".
      - `dependencies` are provider projects in declaration order, without repeats.
    """

    name: str
    path: str
    kind: ProjectKind
    dependencies: tuple[Project, ...] = ()

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidManifestError(self.name, "project name must not be empty")
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def dependency_names(self) -> tuple[str, ...]:
        """Names of the direct provider projects."""
        return tuple(dep.name for dep in self.dependencies)

    def depends_on(self, name: str) -> bool:
        """True if ``name`` is a direct provider of this project."""
        return name in self.dependency_names

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return {
            "name": self.name,
            "path": self.path,
            "kind": self.kind.value,
            "dependencies": list(self.dependency_names),
        }


@dataclass(frozen=True, slots=True)
class Package:
    """A named unit of libraries, unit tests and sub-package references."""

    name: str
    path: str
    packages: tuple[Package, ...] = ()
    main_libs: tuple[Project, ...] = ()
    test_libs: tuple[Project, ...] = ()
    unittests: tuple[Project, ...] = ()

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvalidManifestError(self.name, "package name must not be empty")
        for attr in ("packages", "main_libs", "test_libs", "unittests"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

    def get_main_lib(self) -> tuple[Project, ...]:
        """The package's main libraries."""
        return self.main_libs

    def get_test_lib(self) -> tuple[Project, ...]:
        """The package's test libraries (may be empty)."""
        return self.test_libs

    def get_unittest(self) -> tuple[Project, ...]:
        """The package's unit-test projects."""
        return self.unittests

    def get_package(self, name: str) -> Package | None:
        """Return the direct sub-package called ``name``, if any.

        Note:
            `name` lookup is case-insensitive.
        """
        key = name.lower()
        for package in self.packages:
            if package.name.lower() == key:
                return package
        return None

    @property
    def projects(self) -> tuple[Project, ...]:
        """All projects declared by this package, libraries first."""
        return self.main_libs + self.test_libs + self.unittests

    def dependency_edges(self) -> list[tuple[str, str]]:
        """Return (consumer, provider) name pairs for this package's projects."""
        return [
            (project.name, provider)
            for project in self.projects
            for provider in project.dependency_names
        ]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return {
            "name": self.name,
            "path": self.path,
            "packages": [package.name for package in self.packages],
            "main_libs": [project.to_dict() for project in self.main_libs],
            "test_libs": [project.to_dict() for project in self.test_libs],
            "unittests": [project.to_dict() for project in self.unittests],
        }
