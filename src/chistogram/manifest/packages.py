"""Package description of 'chistogram'."""

from .builder import new_package, setup_cpp_lib_project, setup_cpp_test_project
from .model import Package, default_path
from .registry import InMemoryPackageRegistry, PackageRegistry
from .siblings import get_cbase_package, get_cfile_package, get_cunittest_package

PACKAGE_NAME = "chistogram"
PACKAGE_PATH = default_path(PACKAGE_NAME)


def get_package() -> Package:
    """Return the package object of 'chistogram'."""
    # Dependencies
    cunittestpkg = get_cunittest_package()
    cfilepkg = get_cfile_package()
    cbasepkg = get_cbase_package()

    # The main (chistogram) package
    mainpkg = new_package(PACKAGE_NAME)
    mainpkg.add_package(cunittestpkg)
    mainpkg.add_package(cfilepkg)
    mainpkg.add_package(cbasepkg)

    # 'chistogram' library
    mainlib = setup_cpp_lib_project(PACKAGE_NAME, PACKAGE_PATH)
    mainlib.add_dependencies(*cfilepkg.get_main_lib())
    mainlib.add_dependencies(*cbasepkg.get_main_lib())

    # 'chistogram' unittest project
    maintest = setup_cpp_test_project(f"{PACKAGE_NAME}_test", PACKAGE_PATH)
    maintest.add_dependencies(*cunittestpkg.get_main_lib())
    maintest.add_dependencies(*cfilepkg.get_main_lib())
    maintest.add_dependencies(*cbasepkg.get_main_lib())
    maintest.add_dependency(mainlib)

    mainpkg.add_main_lib(mainlib)
    mainpkg.add_unittest(maintest)
    return mainpkg.build()


def default_registry() -> PackageRegistry:
    """Return a registry holding 'chistogram' and its sibling packages."""
    return InMemoryPackageRegistry(
        [
            get_cbase_package(),
            get_cfile_package(),
            get_cunittest_package(),
            get_package(),
        ]
    )
