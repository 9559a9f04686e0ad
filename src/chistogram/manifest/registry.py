"""Package registry interface and its in-memory adapter."""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterable

from .errors import DuplicatePackageError, UnresolvedPackageError
from .model import Package

logger = logging.getLogger(__name__)


class PackageRegistry(abc.ABC):
    """Interface for package lookups and registration."""

    @abc.abstractmethod
    def get(self, name: str) -> Package | None:
        """Get a package by its name.

        Args:
            name: The package name (e.g. "chistogram").

        Returns:
            The package if found, otherwise None.

        Note:
            `name` lookup is case-insensitive; implementers should lowercase it.
        """

    @abc.abstractmethod
    def register(self, package: Package) -> None:
        """Register a new package.

        Args:
            package: The package to register.

        Raises:
            DuplicatePackageError: If a package with the same name already exists.
        """

    @abc.abstractmethod
    def names(self) -> list[str]:
        """Return the registered package names in registration order."""

    def resolve(self, name: str) -> Package:
        """Get a package by its name, failing fast if it is unknown.

        Raises:
            UnresolvedPackageError: If no package called ``name`` is registered.
        """
        if (package := self.get(name)) is None:
            raise UnresolvedPackageError(name)
        return package

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


class InMemoryPackageRegistry(PackageRegistry):
    """Dictionary-backed registry keyed by lowercase package name."""

    def __init__(self, packages: Iterable[Package] = ()) -> None:
        self._packages: dict[str, Package] = {}
        for package in packages:
            self.register(package)

    def get(self, name: str) -> Package | None:
        return self._packages.get(name.lower())

    def register(self, package: Package) -> None:
        key = package.name.lower()
        if key in self._packages:
            raise DuplicatePackageError(package.name)
        self._packages[key] = package
        logger.debug("Registered package %s (%s)", package.name, package.path)

    def names(self) -> list[str]:
        return [package.name for package in self._packages.values()]
