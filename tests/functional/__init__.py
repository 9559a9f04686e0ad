"""Functional tests.

Purpose
- Validate whole-module behaviour: realistic workloads recorded and reported,
  and the shipped package registry as a whole.

Guidelines
- Go through the public API; avoid asserting internal state.
- Compare against an independent oracle (e.g. numpy order statistics).
"""
