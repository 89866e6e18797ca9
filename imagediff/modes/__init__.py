"""Render modes for diff output.

Every .py file in this package that defines a `mode` object is
auto-registered by imagediff.registry.discover().

The explicit imports below make sure the modules are bundled by freezers
that cannot see pkgutil-based discovery.
"""

# keep this list in sync with the mode modules
import imagediff.modes.bw as _bw  # noqa: F401
import imagediff.modes.color as _color  # noqa: F401
import imagediff.modes.gray as _gray  # noqa: F401
