"""Package manifest for CHISTOGRAM."""

from .builder import (
    PackageBuilder,
    ProjectBuilder,
    new_package,
    setup_cpp_lib_project,
    setup_cpp_test_project,
)
from .model import Package, Project, ProjectKind
from .packages import default_registry, get_package
from .registry import InMemoryPackageRegistry, PackageRegistry

__all__ = [
    "InMemoryPackageRegistry",
    "Package",
    "PackageBuilder",
    "PackageRegistry",
    "Project",
    "ProjectBuilder",
    "ProjectKind",
    "default_registry",
    "get_package",
    "new_package",
    "setup_cpp_lib_project",
    "setup_cpp_test_project",
]
