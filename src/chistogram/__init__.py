"""CHISTOGRAM

An HDR (High Dynamic Range) histogram for recording integer samples such as
latencies with a fixed number of significant figures, together with the
package manifest that wires the library to its sibling packages.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
