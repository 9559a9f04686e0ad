"""Registration functions of the sibling packages chistogram builds against.

These packages live in their own repositories; here they are only opaque
dependency handles exposing their main library.
"""

from .builder import new_package, setup_cpp_lib_project
from .model import Package, default_path


def get_cbase_package() -> Package:
    """Return the 'cbase' base utilities package."""
    mainpkg = new_package("cbase")
    mainlib = setup_cpp_lib_project("cbase", default_path("cbase"))
    mainpkg.add_main_lib(mainlib)
    return mainpkg.build()


def get_cfile_package() -> Package:
    """Return the 'cfile' file I/O package (built on 'cbase')."""
    cbasepkg = get_cbase_package()

    mainpkg = new_package("cfile")
    mainpkg.add_package(cbasepkg)

    mainlib = setup_cpp_lib_project("cfile", default_path("cfile"))
    mainlib.add_dependencies(*cbasepkg.get_main_lib())

    mainpkg.add_main_lib(mainlib)
    return mainpkg.build()


def get_cunittest_package() -> Package:
    """Return the 'cunittest' unit-test framework package."""
    mainpkg = new_package("cunittest")
    mainlib = setup_cpp_lib_project("cunittest", default_path("cunittest"))
    mainpkg.add_main_lib(mainlib)
    return mainpkg.build()
