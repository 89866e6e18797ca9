"""Render-mode auto-discovery and lookup.

Scans imagediff/modes/ for modules that define a `mode` object of type
RenderMode. Collects them into a dict keyed by name.

Unknown mode names are not an error: get() falls back to the 'color'
mode so callers always receive a usable renderer.
"""

import importlib
import logging
import pkgutil
import threading

from imagediff.core.types import DEFAULT_MODE, RenderMode

logger = logging.getLogger(__name__)

_registry: dict[str, RenderMode] = {}
_lock = threading.Lock()

# Known mode module names, used when pkgutil cannot list the package
_MODE_MODULES = [
    'bw',
    'color',
    'gray',
]


def discover() -> dict[str, RenderMode]:
    """Import all mode modules and return the registry."""
    with _lock:
        if _registry:
            return _registry

        import imagediff.modes as pkg

        found_modules = [
            modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
        ]
        if not found_modules:
            found_modules = _MODE_MODULES

        for modname in found_modules:
            module = importlib.import_module(f'imagediff.modes.{modname}')
            mode = getattr(module, 'mode', None)
            if isinstance(mode, RenderMode):
                _registry[mode.name] = mode

        return _registry


def get(name: str) -> RenderMode:
    """Get a render mode by name, falling back to 'color' for unknown names."""
    reg = discover()
    if name in reg:
        return reg[name]
    logger.debug('Unknown diff mode %r, using %r', name, DEFAULT_MODE)
    return reg[DEFAULT_MODE]


def all_modes() -> dict[str, RenderMode]:
    """Return all registered render modes."""
    return discover()
