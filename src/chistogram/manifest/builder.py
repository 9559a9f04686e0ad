"""Builder calls used by package registration functions.

Registration functions describe a package with a flat, straight-line sequence
of calls::

    mainpkg = new_package("chistogram")
    mainpkg.add_package(cbasepkg)

    mainlib = setup_cpp_lib_project("chistogram", path)
    mainlib.add_dependencies(*cbasepkg.get_main_lib())

    mainpkg.add_main_lib(mainlib)
    return mainpkg.build()

Builders collect the declarations; `build()` checks the manifest invariants
and returns frozen `Package`/`Project` values. A builder passed to another
builder is kept as a reference and only built when the package is built, so
dependencies declared on it later are not lost. Nothing is resolved
dynamically: every provider must be declared by the time `build()` runs.
"""

from __future__ import annotations

import logging

from .errors import (
    DuplicatePackageError,
    InvalidManifestError,
    SelfDependencyError,
    UnresolvedDependencyError,
)
from .model import Package, Project, ProjectKind, default_path

logger = logging.getLogger(__name__)


def _build(project: Project | ProjectBuilder) -> Project:
    return project.build() if isinstance(project, ProjectBuilder) else project


class ProjectBuilder:
    """Collects the dependencies of one project."""

    def __init__(self, name: str, path: str, kind: ProjectKind) -> None:
        if not name.strip():
            raise InvalidManifestError(name, "project name must not be empty")
        self.name = name
        self.path = path
        self.kind = kind
        self._dependencies: list[Project | ProjectBuilder] = []
        self._building = False

    def __repr__(self) -> str:
        return f"ProjectBuilder(name={self.name!r}, kind={self.kind.value!r})"

    @property
    def dependencies(self) -> tuple[Project, ...]:
        """Providers added so far, in declaration order, as they stand now."""
        return tuple(_build(dep) for dep in self._dependencies)

    def add_dependency(self, project: Project | ProjectBuilder) -> ProjectBuilder:
        """Declare ``project`` as a provider of this project.

        A `ProjectBuilder` is kept as a reference: dependencies added to it
        afterwards are part of the provider this project ends up with.
        Adding a provider that is already present is a no-op.

        Raises:
            SelfDependencyError: If ``project`` is this project.
        """
        if project is self or project.name == self.name:
            raise SelfDependencyError(self.name)
        if project.name not in (dep.name for dep in self._dependencies):
            self._dependencies.append(project)
        return self

    def add_dependencies(self, *projects: Project | ProjectBuilder) -> ProjectBuilder:
        """Declare several providers at once."""
        for project in projects:
            self.add_dependency(project)
        return self

    def build(self) -> Project:
        """Return the immutable project.

        Raises:
            InvalidManifestError: If the builders reference each other in a cycle.
        """
        if self._building:
            raise InvalidManifestError(self.name, "dependency cycle between projects")
        self._building = True
        try:
            dependencies = self.dependencies
        finally:
            self._building = False
        return Project(
            name=self.name,
            path=self.path,
            kind=self.kind,
            dependencies=dependencies,
        )


class PackageBuilder:
    """Collects the sub-packages and projects of one package."""

    def __init__(self, name: str, path: str | None = None) -> None:
        if not name.strip():
            raise InvalidManifestError(name, "package name must not be empty")
        self.name = name
        self.path = path if path is not None else default_path(name)
        self._packages: dict[str, Package] = {}
        self._main_libs: list[Project | ProjectBuilder] = []
        self._test_libs: list[Project | ProjectBuilder] = []
        self._unittests: list[Project | ProjectBuilder] = []

    def __repr__(self) -> str:
        return f"PackageBuilder(name={self.name!r}, path={self.path!r})"

    def add_package(self, package: Package) -> PackageBuilder:
        """Reference a sibling package whose libraries this package consumes.

        Raises:
            DuplicatePackageError: If a package with the same name was already added.
        """
        key = package.name.lower()
        if key in self._packages or key == self.name.lower():
            raise DuplicatePackageError(package.name, parent=self.name)
        self._packages[key] = package
        return self

    def add_main_lib(self, project: Project | ProjectBuilder) -> PackageBuilder:
        """Set (or add) a main library of the package."""
        self._main_libs.append(self._checked(project, ProjectKind.CPP_LIB, "main library"))
        return self

    def add_test_lib(self, project: Project | ProjectBuilder) -> PackageBuilder:
        """Add a library only used by the package's unit tests."""
        self._test_libs.append(self._checked(project, ProjectKind.CPP_LIB, "test library"))
        return self

    def add_unittest(self, project: Project | ProjectBuilder) -> PackageBuilder:
        """Add a unit-test project."""
        self._unittests.append(self._checked(project, ProjectKind.CPP_TEST, "unittest"))
        return self

    def _checked(
        self, project: Project | ProjectBuilder, kind: ProjectKind, role: str
    ) -> Project | ProjectBuilder:
        if project.kind is not kind:
            raise InvalidManifestError(
                self.name,
                f"{role} {project.name!r} must be a {kind.value} project, "
                f"got {project.kind.value}",
            )
        return project

    def _validate(
        self,
        main_libs: tuple[Project, ...],
        test_libs: tuple[Project, ...],
        unittests: tuple[Project, ...],
    ) -> None:
        provided = {p.name: p for p in main_libs + test_libs}
        for package in self._packages.values():
            provided.update((p.name, p) for p in package.main_libs + package.test_libs)

        for project in main_libs + test_libs + unittests:
            for provider in project.dependencies:
                if provider.name not in provided:
                    raise UnresolvedDependencyError(project.name, provider.name)
                # a provider built before its own dependencies were complete
                if provider != provided[provider.name]:
                    raise InvalidManifestError(
                        self.name,
                        f"{project.name!r} depends on an outdated copy of {provider.name!r}",
                    )

        # unit tests link their own library and every sub-package library
        required = {p.name for p in main_libs}
        for package in self._packages.values():
            required.update(p.name for p in package.main_libs)
        for test in unittests:
            if missing := sorted(required - set(test.dependency_names)):
                raise InvalidManifestError(
                    self.name,
                    f"unittest {test.name!r} is missing dependencies: {', '.join(missing)}",
                )

    def build(self) -> Package:
        """Build the declared projects, validate them and return the immutable package.

        Raises:
            UnresolvedDependencyError: If a project depends on a library that
                neither this package nor its sub-packages provide.
            InvalidManifestError: If a unit test does not depend on the
                package's main library and every sub-package's main library,
                or if a project holds a provider that differs from the one
                the package declares.
        """
        main_libs = tuple(_build(p) for p in self._main_libs)
        test_libs = tuple(_build(p) for p in self._test_libs)
        unittests = tuple(_build(p) for p in self._unittests)
        self._validate(main_libs, test_libs, unittests)
        package = Package(
            name=self.name,
            path=self.path,
            packages=tuple(self._packages.values()),
            main_libs=main_libs,
            test_libs=test_libs,
            unittests=unittests,
        )
        logger.debug(
            "Built package %s: %d sub-packages, %d dependency edges",
            package.name,
            len(package.packages),
            len(package.dependency_edges()),
        )
        return package


def new_package(name: str, path: str | None = None) -> PackageBuilder:
    """Start describing a package; ``path`` defaults to the repository root + name."""
    return PackageBuilder(name, path)


def setup_cpp_lib_project(name: str, path: str) -> ProjectBuilder:
    """Start describing a C++ library project."""
    return ProjectBuilder(name, path, ProjectKind.CPP_LIB)


def setup_cpp_test_project(name: str, path: str) -> ProjectBuilder:
    """Start describing a C++ unit-test executable project."""
    return ProjectBuilder(name, path, ProjectKind.CPP_TEST)


# Older registration functions call the "default" test-project setup.
setup_default_cpp_test_project = setup_cpp_test_project
