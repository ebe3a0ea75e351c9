"""
IRLS control parameters.

Mirrors R's glm.control(): a small validated bundle of stopping-rule
settings. A process-wide default is used whenever a fitting routine is
called without explicit values.

Examples
--------
>>> from pycurvefit import glm_control, set_default_control
>>> set_default_control(glm_control(epsilon=1e-10, maxit=50))
"""

from dataclasses import dataclass, replace

_VALID_NORMS = ("max", "euclidean")


@dataclass(frozen=True)
class IRLSControl:
    """
    Stopping rule for IRLS.

    Attributes
    ----------
    epsilon : float
        Convergence tolerance on the change in coefficients
    maxit : int
        Maximum number of IRLS iterations
    norm : str
        Norm used for the coefficient change: 'max' or 'euclidean'
    trace : bool
        Log every iteration at INFO level instead of DEBUG
    """
    epsilon: float = 1e-8
    maxit: int = 100
    norm: str = "max"
    trace: bool = False

    def __post_init__(self):
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if int(self.maxit) != self.maxit or self.maxit < 1:
            raise ValueError(f"maxit must be a positive integer, got {self.maxit}")
        if self.norm not in _VALID_NORMS:
            raise ValueError(
                f"Unknown norm: '{self.norm}'\n"
                f"Valid options: {', '.join(repr(n) for n in _VALID_NORMS)}"
            )


_DEFAULT = IRLSControl()
_control_override = None


def glm_control(**kwargs) -> IRLSControl:
    """Build an IRLSControl, starting from the current default."""
    return replace(get_default_control(), **kwargs)


def get_default_control() -> IRLSControl:
    """Return the active default IRLSControl."""
    if _control_override is not None:
        return _control_override
    return _DEFAULT


def set_default_control(control: IRLSControl) -> None:
    """Override the default IRLSControl for this process."""
    global _control_override
    if not isinstance(control, IRLSControl):
        raise TypeError(
            f"control must be an IRLSControl, got {type(control).__name__}"
        )
    _control_override = control


def reset_default_control() -> None:
    """Restore the built-in IRLSControl defaults."""
    global _control_override
    _control_override = None


__all__ = [
    "IRLSControl",
    "glm_control",
    "get_default_control",
    "set_default_control",
    "reset_default_control",
]
