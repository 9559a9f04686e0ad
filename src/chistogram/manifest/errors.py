"""Errors raised while describing packages."""


class ManifestError(Exception):
    """Base class for all package-manifest errors."""

    def __init__(self, name: str, message: str | None = None) -> None:
        if message is None:
            message = f"package manifest error ({name})"
        super().__init__(message)
        self.name = name


class InvalidManifestError(ManifestError):
    """Raised when a project or package violates a manifest invariant."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(name, f"Invalid manifest ({name}): {reason}")
        self.reason = reason


class DuplicatePackageError(ManifestError):
    """Raised when a package name is registered twice in the same parent."""

    def __init__(self, name: str, parent: str | None = None) -> None:
        where = f"package {parent}" if parent else "registry"
        super().__init__(name, f"Package ({name}) is already registered in {where}")
        self.parent = parent


class UnresolvedPackageError(ManifestError):
    """Raised when a package cannot be found by name."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Package ({name}) not found in registry")


class UnresolvedDependencyError(ManifestError):
    """Raised when a project depends on a library no package provides."""

    def __init__(self, consumer: str, provider: str) -> None:
        super().__init__(
            consumer,
            f"Project ({consumer}) depends on ({provider}) "
            "which is not provided by its package or sub-packages",
        )
        self.consumer = consumer
        self.provider = provider


class SelfDependencyError(ManifestError):
    """Raised when a project is declared as its own dependency."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Project ({name}) cannot depend on itself")
