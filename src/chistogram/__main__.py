"""Allow ``python -m chistogram``."""

from chistogram.entrypoints.cli.main import chistogram

if __name__ == "__main__":
    chistogram()  # pylint: disable=no-value-for-parameter
