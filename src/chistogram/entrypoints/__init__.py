"""Entrypoints (inbound adapters) for CHISTOGRAM.

Expose the library to the outside world: parse and validate inputs, call into
`chistogram.hdr` and `chistogram.manifest`, and present results.
"""
