"""
Backend selection and management.

Resolution order for the backend name (first match wins):
    1. The ``backend`` argument, unless it is ``'auto'``.
    2. The ``PYCURVEFIT_BACKEND`` environment variable.
    3. ``'cpu'``.
"""

import os
from typing import Optional

from .base import BackendBase, LinearModelResult
from .cpu_fp64_backend import CPUBackendFP64

_BACKENDS = {
    'cpu': CPUBackendFP64,
}

ENV_VAR = "PYCURVEFIT_BACKEND"


def resolve_backend_name(backend: Optional[str] = 'auto') -> str:
    """Return the concrete backend name that `get_backend` would build."""
    name = (backend or 'auto').strip().lower()
    if name == 'auto':
        name = os.environ.get(ENV_VAR, '').strip().lower() or 'cpu'
        if name == 'auto':
            name = 'cpu'
    if name not in _BACKENDS:
        raise ValueError(
            f"Unknown backend: '{name}'\n"
            f"Valid options: 'auto', {', '.join(repr(b) for b in _BACKENDS)}"
        )
    return name


def get_backend(backend='auto') -> BackendBase:
    """
    Get computational backend.

    Parameters
    ----------
    backend : str or BackendBase
        'auto' or 'cpu'. A backend instance is returned unchanged.

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('cpu')
    >>> backend.name
    'cpu_fp64'
    """
    if isinstance(backend, BackendBase):
        return backend
    return _BACKENDS[resolve_backend_name(backend)]()


def list_available_backends() -> list:
    """List names of available backends."""
    return list(_BACKENDS)


__all__ = [
    'get_backend',
    'resolve_backend_name',
    'list_available_backends',
    'BackendBase',
    'LinearModelResult',
    'ENV_VAR',
]
