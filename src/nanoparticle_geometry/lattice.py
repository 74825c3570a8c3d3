"""
Crystal Lattice.

Unit cells with their basis atoms, the fractional-coordinate to basis-atom
lookup, and the lazy enumerator that walks a cube of fractional lattice
coordinates.
"""

from __future__ import annotations

import logging
from copy import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from .config import DEFAULT_PRECISION, FCC_BASIS_OFFSETS, FCC_SPACE_GROUP, FCC_STEP
from .errors import InvalidElementError
from .numeric import Real, ScalarLike, common_precision, pi, to_real
from .vector import Vector3

logger = logging.getLogger(__name__)


class LatticeType(Enum):
    """Supported Bravais lattice types."""

    FCC = "fcc"

    @property
    def step(self) -> str:
        """Enumeration step in lattice units."""
        return FCC_STEP


def normalize_element(symbol: str) -> str:
    """Capitalize a 1-2 letter element symbol (``"AU"`` -> ``"Au"``).

    Raises:
        InvalidElementError: For empty, non-alphabetic or longer labels.
    """
    symbol = symbol.strip()
    if not 1 <= len(symbol) <= 2 or not symbol.isalpha():
        raise InvalidElementError(f"Invalid element symbol: {symbol!r}")
    return symbol[0].upper() + symbol[1:].lower()


def format_charge(charge: int) -> str:
    """Formal charge as written in structure files: ``+2``, ``-1``, ``0``."""
    if charge > 0:
        return f"+{charge}"
    return str(charge)


@dataclass(frozen=True)
class BasisAtom:
    """An atom at a fixed fractional offset inside the unit cell."""

    species: str
    offset: Vector3
    charge: int
    radius: Real

    def __post_init__(self):
        object.__setattr__(self, "species", normalize_element(self.species))
        common_precision(self.offset.x, self.radius)

    @classmethod
    def create(
        cls,
        species: str,
        offset: Sequence[ScalarLike],
        charge: int = 0,
        radius: ScalarLike = "0",
        precision: int = DEFAULT_PRECISION,
    ) -> BasisAtom:
        return cls(
            species=species,
            offset=Vector3.of(*offset, precision=precision),
            charge=charge,
            radius=to_real(radius, precision),
        )

    @property
    def precision(self) -> int:
        return self.offset.precision

    @property
    def formal_charge(self) -> str:
        return format_charge(self.charge)

    @property
    def volume(self) -> Real:
        """Sphere volume 4/3 pi r³ of the atom."""
        r = self.radius
        return pi(self.precision) * 4 / 3 * r * r * r


@dataclass(frozen=True)
class UnitCell:
    """Crystal unit cell with its basis.

    Attributes:
        a, b, c: Edge lengths in Å
        alpha, beta, gamma: Angles in degrees
        space_group: Hermann-Mauguin symbol
        basis: Basis atoms in lookup order
        lattice_type: Bravais lattice tag
    """

    a: Real
    b: Real
    c: Real
    alpha: Real
    beta: Real
    gamma: Real
    space_group: str
    basis: tuple[BasisAtom, ...]
    lattice_type: LatticeType = LatticeType.FCC

    def __post_init__(self):
        common_precision(self.a, self.b, self.c, self.alpha, self.beta, self.gamma,
                         *(atom.radius for atom in self.basis))

    @classmethod
    def fcc(
        cls,
        lattice_constant: ScalarLike,
        species: str | Sequence[str],
        charges: int | Sequence[int] = 0,
        radii: ScalarLike | Sequence[ScalarLike] = "0",
        precision: int = DEFAULT_PRECISION,
    ) -> UnitCell:
        """Face-centered cubic cell with the four-atom basis.

        Single values apply to all four basis atoms; sequences give one value
        per atom in the order (0,0,0), (½,½,0), (½,0,½), (0,½,½).

        Args:
            lattice_constant: Cell edge a = b = c in Å
            species: Element symbol(s)
            charges: Formal charge(s)
            radii: Atomic radius/radii in Å
            precision: Significant digits for all values

        Returns:
            UnitCell
        """
        def per_atom(value, name):
            if isinstance(value, (str, int, float, Real)) or not isinstance(value, Sequence):
                return [value] * 4
            if len(value) != 4:
                raise ValueError(f"FCC basis needs 4 {name}, got {len(value)}")
            return list(value)

        species_list = per_atom(species, "species")
        charge_list = per_atom(charges, "charges")
        radius_list = per_atom(radii, "radii")
        basis = tuple(
            BasisAtom.create(s, offset, q, r, precision)
            for s, offset, q, r in zip(species_list, FCC_BASIS_OFFSETS,
                                       charge_list, radius_list, strict=True)
        )
        a = to_real(lattice_constant, precision)
        right = Real(90, precision)
        return cls(a, a, a, right, right, right, FCC_SPACE_GROUP, basis, LatticeType.FCC)

    @property
    def precision(self) -> int:
        return self.a.precision

    @property
    def lattice_constant(self) -> Real:
        return self.a

    def cell_lengths(self) -> list[tuple[str, Real]]:
        return [("a", self.a), ("b", self.b), ("c", self.c)]

    def cell_angles(self) -> list[tuple[str, Real]]:
        return [("alpha", self.alpha), ("beta", self.beta), ("gamma", self.gamma)]

    def lattice_point(self, frac_x: Real, frac_y: Real, frac_z: Real) -> BasisAtom | None:
        """Basis atom sitting at a fractional coordinate, if any.

        Each component is reduced with ``abs(v) mod 1`` and compared exactly
        against the basis offsets.

        Raises:
            PrecisionMismatchError: If the components differ in precision.
        """
        common_precision(frac_x, frac_y, frac_z)
        reduced = (abs(frac_x) % 1, abs(frac_y) % 1, abs(frac_z) % 1)
        for atom in self.basis:
            if (atom.offset.x, atom.offset.y, atom.offset.z) == reduced:
                return atom
        return None

    def lattice_point_at(self, fractional: Vector3) -> BasisAtom | None:
        return self.lattice_point(fractional.x, fractional.y, fractional.z)


# =============================================================================
# Lattice enumeration
# =============================================================================

@dataclass
class LatticeCursor:
    """Mutable position of one enumeration pass.

    Owned by a single :class:`LatticeEnumerator`; copy it with
    :meth:`LatticeEnumerator.checkpoint` to hand it elsewhere.
    """

    x: Real
    y: Real
    z: Real
    finished: bool = False

    def position(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)


@dataclass
class LatticeEnumerator:
    """Lazy walk over a cube of fractional coordinates.

    Covers ``[-R, R]³`` with ``R = ceil(radius)`` in steps of ``step``, x
    varying fastest, then y, then z. Yields ``(2R/step + 1)³`` points and
    keeps only the current cursor in memory. Once finished it stays finished;
    build a new enumerator to scan again.
    """

    radius: Real
    step: Real
    cursor: LatticeCursor = field(init=False)

    def __post_init__(self):
        if self.step.sign() <= 0:
            raise ValueError(f"Step must be positive, got {self.step}")
        common_precision(self.radius, self.step)
        self.radius = self.radius.ceil()
        start = -self.radius
        self.cursor = LatticeCursor(start, start, start)

    @classmethod
    def for_lattice(cls, radius: ScalarLike, lattice_type: LatticeType = LatticeType.FCC,
                    precision: int | None = None) -> LatticeEnumerator:
        r = to_real(radius, precision)
        return cls(r, Real(lattice_type.step, r.precision))

    @classmethod
    def resume(cls, cursor: LatticeCursor, radius: Real, step: Real) -> LatticeEnumerator:
        """Continue enumerating from a checkpointed cursor."""
        enumerator = cls(radius, step)
        enumerator.cursor = copy(cursor)
        return enumerator

    @property
    def finished(self) -> bool:
        return self.cursor.finished

    @property
    def expected_count(self) -> int:
        """Total number of points a full pass yields."""
        per_axis = int(self.radius * 2 / self.step) + 1
        return per_axis ** 3

    def checkpoint(self) -> LatticeCursor:
        return copy(self.cursor)

    def next_position(self) -> Vector3 | None:
        """Emit the current coordinate and advance; ``None`` once finished."""
        cur = self.cursor
        if cur.finished:
            return None
        r = self.radius
        if cur.x == r and cur.y == r and cur.z == r:
            cur.finished = True

        output = cur.position()

        cur.x = cur.x + self.step
        if cur.x > r:
            cur.x = -r
            cur.y = cur.y + self.step
            if cur.y > r:
                cur.y = -r
                cur.z = cur.z + self.step
                if cur.z > r:
                    cur.finished = True
        return output

    def __iter__(self) -> Iterator[Vector3]:
        return self

    def __next__(self) -> Vector3:
        position = self.next_position()
        if position is None:
            raise StopIteration
        return position
