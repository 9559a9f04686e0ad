"""CHISTOGRAM test suite.

Folder taxonomy
- unit/        : Fast checks of a single module (histogram, manifest, config, logging, CLI helpers).
- functional/  : Whole-module behaviour through the public API (latency workloads, registry).
- e2e/         : The `chistogram` command line, driven through Click's CliRunner.
- fixtures/    : Shared fixtures, loaded via `pytest_plugins`.
- helpers/     : Shared assertions and default-marker helper (no tests here).

Guidance
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, functional, e2e, property (defaults are added by each folder's conftest).
"""
