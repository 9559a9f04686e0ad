"""Global pytest fixtures for CHISTOGRAM."""

pytest_plugins = [
    "tests.fixtures.histograms",
]
