"""Tests for unit cells, basis lookup and lattice enumeration."""

import pytest

from nanoparticle_geometry import (
    BasisAtom,
    InvalidElementError,
    LatticeEnumerator,
    LatticeType,
    PrecisionMismatchError,
    Real,
    UnitCell,
    Vector3,
)


def r(value, precision=10):
    return Real(value, precision)


@pytest.fixture
def fcc_cell():
    return UnitCell.fcc("4.078", ["Au", "Ag", "Cu", "Pt"], precision=10)


# =============================================================================
# BasisAtom Tests
# =============================================================================

class TestBasisAtom:
    """Test basis atom construction and derived values."""

    def test_element_normalized(self):
        atom = BasisAtom.create("aU", (0, 0, 0), precision=10)
        assert atom.species == "Au"

    def test_single_letter_element(self):
        assert BasisAtom.create(" c ", (0, 0, 0), precision=10).species == "C"

    @pytest.mark.parametrize("label", ["", "Xyz", "A1", "12"])
    def test_invalid_element(self, label):
        with pytest.raises(InvalidElementError):
            BasisAtom.create(label, (0, 0, 0), precision=10)

    def test_formal_charge(self):
        assert BasisAtom.create("Fe", (0, 0, 0), charge=2, precision=10).formal_charge == "+2"
        assert BasisAtom.create("Cl", (0, 0, 0), charge=-1, precision=10).formal_charge == "-1"
        assert BasisAtom.create("Au", (0, 0, 0), precision=10).formal_charge == "0"

    def test_volume(self):
        atom = BasisAtom.create("Au", (0, 0, 0), radius="1", precision=20)
        assert float(atom.volume) == pytest.approx(4.0 / 3.0 * 3.141592653589793)


# =============================================================================
# UnitCell Tests
# =============================================================================

class TestUnitCell:
    """Test FCC unit cell metadata."""

    def test_fcc_parameters(self, fcc_cell):
        assert fcc_cell.a == fcc_cell.b == fcc_cell.c == r("4.078")
        assert fcc_cell.alpha == fcc_cell.beta == fcc_cell.gamma == 90
        assert fcc_cell.space_group == "F m -3 m"
        assert fcc_cell.lattice_type is LatticeType.FCC

    def test_fcc_basis_offsets(self, fcc_cell):
        offsets = [atom.offset for atom in fcc_cell.basis]
        assert offsets == [
            Vector3.of(0, 0, 0, precision=10),
            Vector3.of("0.5", "0.5", 0, precision=10),
            Vector3.of("0.5", 0, "0.5", precision=10),
            Vector3.of(0, "0.5", "0.5", precision=10),
        ]

    def test_single_values_apply_to_all(self):
        cell = UnitCell.fcc("3.615", "Cu", charges=1, radii="1.28", precision=10)
        assert [a.species for a in cell.basis] == ["Cu"] * 4
        assert {a.charge for a in cell.basis} == {1}
        assert {a.radius for a in cell.basis} == {r("1.28")}

    def test_wrong_basis_length(self):
        with pytest.raises(ValueError):
            UnitCell.fcc("4.078", ["Au", "Au"], precision=10)

    def test_cell_lengths_and_angles(self, fcc_cell):
        assert [name for name, _ in fcc_cell.cell_lengths()] == ["a", "b", "c"]
        assert [name for name, _ in fcc_cell.cell_angles()] == ["alpha", "beta", "gamma"]


class TestLatticePoint:
    """Test fractional coordinate to basis atom lookup."""

    def test_reduces_whole_cells(self, fcc_cell):
        """(0.5, 0.5, 1.0) reduces to (0.5, 0.5, 0)."""
        atom = fcc_cell.lattice_point(r("0.5"), r("0.5"), r("1.0"))
        assert atom is fcc_cell.basis[1]
        assert atom.species == "Ag"

    def test_no_atom(self, fcc_cell):
        assert fcc_cell.lattice_point(r("0.3"), r("0.3"), r("0.3")) is None

    def test_corner(self, fcc_cell):
        assert fcc_cell.lattice_point(r(1), r(-2), r(3)) is fcc_cell.basis[0]

    def test_negative_coordinates(self, fcc_cell):
        assert fcc_cell.lattice_point(r("-1.5"), r(2), r("-0.5")) is fcc_cell.basis[2]
        assert fcc_cell.lattice_point(r(0), r("-0.5"), r("1.5")) is fcc_cell.basis[3]

    def test_half_grid_non_sites(self, fcc_cell):
        assert fcc_cell.lattice_point(r("0.5"), r("0.5"), r("0.5")) is None
        assert fcc_cell.lattice_point(r("0.5"), r(0), r(0)) is None

    def test_vector_input(self, fcc_cell):
        assert fcc_cell.lattice_point_at(Vector3.of("0.5", "0.5", 1, precision=10)) is fcc_cell.basis[1]

    def test_precision_mismatch(self, fcc_cell):
        with pytest.raises(PrecisionMismatchError):
            fcc_cell.lattice_point(r("0.5"), Real("0.5", 12), r(0))


# =============================================================================
# LatticeEnumerator Tests
# =============================================================================

class TestLatticeEnumerator:
    """Test the lazy lattice walk."""

    def enumerator(self, radius="2", step="0.5"):
        return LatticeEnumerator(r(radius), r(step))

    def test_point_count(self):
        points = list(self.enumerator())
        assert len(points) == 729
        assert len(set(points)) == 729

    def test_first_and_last(self):
        points = list(self.enumerator())
        assert points[0] == Vector3.of(-2, -2, -2, precision=10)
        assert points[-1] == Vector3.of(2, 2, 2, precision=10)

    def test_x_varies_fastest(self):
        points = list(self.enumerator())
        assert points[1] == Vector3.of("-1.5", -2, -2, precision=10)
        assert points[9] == Vector3.of(-2, "-1.5", -2, precision=10)
        assert points[81] == Vector3.of(-2, -2, "-1.5", precision=10)

    def test_coordinates_on_grid(self):
        grid = {r(v) for v in ("-2", "-1.5", "-1", "-0.5", "0", "0.5", "1", "1.5", "2")}
        for p in self.enumerator():
            assert {p.x, p.y, p.z} <= grid

    @pytest.mark.parametrize("radius,step", [("1", "0.5"), ("3", "0.5"), ("2", "1"), ("1", "0.25")])
    def test_count_formula(self, radius, step):
        e = self.enumerator(radius, step)
        expected = (int(2 * int(radius) / float(step)) + 1) ** 3
        assert e.expected_count == expected
        assert sum(1 for _ in e) == expected

    def test_radius_rounded_up(self):
        assert len(list(self.enumerator("1.2"))) == 729

    def test_zero_radius_single_point(self):
        e = self.enumerator("0")
        assert e.next_position() == Vector3.of(0, 0, 0, precision=10)
        assert e.next_position() is None

    def test_exhausted_returns_none(self):
        e = self.enumerator("1")
        for _ in e:
            pass
        assert e.finished
        assert e.next_position() is None
        assert e.next_position() is None

    def test_not_restartable(self):
        e = self.enumerator("1")
        assert len(list(e)) == 125
        assert list(e) == []

    def test_checkpoint_resume(self):
        full = list(self.enumerator())
        e = self.enumerator()
        head = [e.next_position() for _ in range(100)]
        cursor = e.checkpoint()
        resumed = LatticeEnumerator.resume(cursor, r("2"), r("0.5"))
        assert head + list(resumed) == full
        # the checkpoint is a copy; the original keeps going on its own
        assert len(list(e)) == 629

    def test_for_lattice(self):
        e = LatticeEnumerator.for_lattice("1", LatticeType.FCC, precision=10)
        assert e.step == r("0.5")
        assert e.expected_count == 125

    def test_invalid_step(self):
        with pytest.raises(ValueError):
            self.enumerator(step="0")

    def test_precision_mismatch(self):
        with pytest.raises(PrecisionMismatchError):
            LatticeEnumerator(Real(2, 10), Real("0.5", 20))
