"""
Package constants.

Central registry for defaults shared by the numeric layer, the lattice code
and the mmCIF writer. The default precision can be overridden with the
``NANOPARTICLE_GEOMETRY_PRECISION`` environment variable.
"""
import os

LOGGER_NAMESPACE: str = "nanoparticle_geometry"

PRECISION_ENV_VAR: str = "NANOPARTICLE_GEOMETRY_PRECISION"


def _default_precision() -> int:
    raw = os.environ.get(PRECISION_ENV_VAR)
    if raw is None:
        return 30
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{PRECISION_ENV_VAR} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{PRECISION_ENV_VAR} must be positive, got {value}")
    return value


# Significant digits used when no precision is given
DEFAULT_PRECISION: int = _default_precision()

# FCC grid spacing in lattice units (half the cell edge)
FCC_STEP: str = "0.5"
FCC_SPACE_GROUP: str = "F m -3 m"
FCC_BASIS_OFFSETS: tuple[tuple[str, str, str], ...] = (
    ("0", "0", "0"),
    ("0.5", "0.5", "0"),
    ("0.5", "0", "0.5"),
    ("0", "0.5", "0.5"),
)

DEFAULT_STRUCTURE_INDEX: str = "1"
