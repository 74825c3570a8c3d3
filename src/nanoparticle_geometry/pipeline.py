"""
Nanoparticle Assembly.

Walks the lattice, keeps the coordinates that hold a basis atom and fall
inside the target shape, and returns them as indexed atoms.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .errors import BuildCancelledError
from .lattice import BasisAtom, LatticeEnumerator, UnitCell, format_charge
from .numeric import Real, ScalarLike, to_real
from .shape import Region
from .shapes import get_shape
from .vector import Vector3, scale

logger = logging.getLogger(__name__)


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class Atom:
    """A placed atom of the finished structure.

    Attributes:
        species: Element symbol
        position: Cartesian position in Å
        fractional: Fractional lattice coordinate it came from
        charge: Formal charge
        radius: Atomic radius in Å
        index: 1-based index within the structure
    """

    species: str
    position: Vector3
    fractional: Vector3
    charge: int
    radius: Real
    index: int

    @property
    def formal_charge(self) -> str:
        return format_charge(self.charge)


def cartesian_position(fractional: Vector3, basis_atom: BasisAtom, lattice_constant: Real) -> Vector3:
    """Cartesian position of ``basis_atom`` in the cell holding ``fractional``.

    The atom was matched on ``abs(c) mod 1``, so each component is the
    whole-cell part of ``abs(c)`` plus the basis offset, carrying the sign of
    ``c``. The result is scaled by the lattice constant.
    """
    components = []
    for c, offset in zip(fractional, basis_atom.offset):
        whole = abs(c).floor() + offset
        components.append(-whole if c.sign() < 0 else whole)
    return scale(Vector3(*components), lattice_constant)


def lattice_bound(radius: Real, lattice_constant: Real) -> Real:
    """Half-width of the fractional cube that covers a ball of ``radius`` Å."""
    return (radius / lattice_constant).ceil()


def build_atoms(
    unit_cell: UnitCell,
    region: Region,
    radius: ScalarLike | None = None,
    cancel: CancelToken | None = None,
) -> list[Atom]:
    """Fill ``region`` with atoms of ``unit_cell``.

    Args:
        unit_cell: Crystal to carve from
        region: Target shape centered on the origin
        radius: Bounding radius in Å; defaults to the region's radius
        cancel: Optional token checked once per enumerated point

    Returns:
        Atoms in enumeration order with indices 1, 2, 3, ...

    Raises:
        BuildCancelledError: If ``cancel`` is set during the build
    """
    precision = unit_cell.precision
    r = region.radius if radius is None else to_real(radius, precision)
    a = unit_cell.lattice_constant
    enumerator = LatticeEnumerator.for_lattice(lattice_bound(r, a), unit_cell.lattice_type, precision)

    logger.info(
        "Building %s (radius %s Å) from %s lattice, a = %s Å: scanning %d lattice points",
        region.name, r, unit_cell.lattice_type.value, a, enumerator.expected_count,
    )

    atoms: list[Atom] = []
    for fractional in enumerator:
        if cancel is not None and cancel.is_set():
            raise BuildCancelledError(f"Build of {region.name} cancelled after {len(atoms)} atoms")
        basis_atom = unit_cell.lattice_point_at(fractional)
        if basis_atom is None:
            continue
        position = cartesian_position(fractional, basis_atom, a)
        if not region.contains(position):
            continue
        atoms.append(Atom(
            species=basis_atom.species,
            position=position,
            fractional=fractional,
            charge=basis_atom.charge,
            radius=basis_atom.radius,
            index=len(atoms) + 1,
        ))

    logger.info("Built %s with %d atoms", region.name, len(atoms))
    return atoms


def build_nanoparticle(
    shape_name: str,
    radius: ScalarLike,
    unit_cell: UnitCell,
    cancel: CancelToken | None = None,
) -> list[Atom]:
    """Build a named library shape of circumradius ``radius`` Å."""
    region = get_shape(shape_name, radius, unit_cell.precision)
    return build_atoms(unit_cell, region, cancel=cancel)
