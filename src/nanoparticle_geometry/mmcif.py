"""
mmCIF Writer.

Writes a nanoparticle as an mmCIF file: a header built from the unit cell
followed by one ``_atom_site`` record per atom. Output goes to a temporary
file next to the target and is moved into place on close, so a failed build
never leaves a partial structure behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, TextIO

from .config import DEFAULT_STRUCTURE_INDEX
from .lattice import UnitCell
from .pipeline import Atom

logger = logging.getLogger(__name__)

ATOM_SITE_FIELDS = (
    "group_PDB",
    "id",
    "type_symbol",
    "label_atom_id",
    "label_alt_id",
    "label_comp_id",
    "label_asym_id",
    "label_entity_id",
    "label_seq_id",
    "pdbx_PDB_ins_code",
    "Cartn_x",
    "Cartn_y",
    "Cartn_z",
    "occupancy",
    "B_iso_or_equiv",
    "pdbx_formal_charge",
    "auth_seq_id",
    "auth_comp_id",
    "auth_asym_id",
    "auth_atom_id",
    "pdbx_PDB_model_num",
)


class MmCifWriter:
    """Streaming mmCIF writer.

    Example:
        >>> with MmCifWriter("gold.cif") as writer:
        ...     writer.write_header(cell, "1")
        ...     for atom in atoms:
        ...         writer.add_atom(atom)
    """

    def __init__(self, path: str | os.PathLike):
        path = Path(path)
        if path.suffix != ".cif":
            path = path.with_name(path.name + ".cif")
        self.path = path
        self.atom_count = 0
        self._header_written = False
        fd, tmp_name = tempfile.mkstemp(suffix=".cif.tmp", dir=path.parent or None)
        self._tmp_path = Path(tmp_name)
        self._handle: TextIO | None = os.fdopen(fd, "w", encoding="utf-8", newline="\n")

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _stream(self) -> TextIO:
        if self._handle is None:
            raise RuntimeError(f"Writer for {self.path} has already been closed")
        return self._handle

    def write_header(self, unit_cell: UnitCell, structure_index: str = DEFAULT_STRUCTURE_INDEX) -> None:
        """Write entry, cell, symmetry and the ``_atom_site`` loop header."""
        if self._header_written:
            raise RuntimeError("Header has already been written")
        out = self._stream()
        out.write(f"data_{structure_index}\n")
        out.write(f"_entry.id {structure_index}\n\n")
        out.write(f"_cell.entry_id {structure_index}\n")
        for name, value in unit_cell.cell_lengths():
            out.write(f"_cell.length_{name} {value}\n")
        for name, value in unit_cell.cell_angles():
            out.write(f"_cell.angle_{name} {value}\n")
        out.write(f"_symmetry.entry_id {structure_index}\n")
        out.write(f'_symmetry.space_group_name_H-M "{unit_cell.space_group}"\n\n')
        out.write("loop_\n")
        for field in ATOM_SITE_FIELDS:
            out.write(f"_atom_site.{field}\n")
        self._header_written = True

    def add_atom(self, atom: Atom) -> None:
        """Append one ``HETATM`` record."""
        out = self._stream()
        if not self._header_written:
            raise RuntimeError("write_header must be called before add_atom")
        element = atom.species
        label = f"{element}{atom.index}"
        x, y, z = atom.position.to_strings()
        tokens = (
            "HETATM", str(atom.index), element, label, ".", element, "A", "1",
            str(atom.index), ".", x, y, z, "1.00", "1.00", atom.formal_charge,
            str(atom.index), element, "A", label, "1",
        )
        out.write(" ".join(tokens) + "\n")
        self.atom_count += 1

    def close(self) -> Path:
        """Finish the file and move it to :attr:`path`."""
        out = self._stream()
        out.close()
        self._handle = None
        os.replace(self._tmp_path, self.path)
        logger.info("Wrote %d atoms to %s", self.atom_count, self.path)
        return self.path

    def abort(self) -> None:
        """Discard everything written so far."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self._tmp_path.unlink(missing_ok=True)
        logger.warning("Discarded partial output for %s", self.path)

    def __enter__(self) -> MmCifWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        elif not self.closed:
            self.close()


def write_mmcif(
    path: str | os.PathLike,
    atoms: Iterable[Atom],
    unit_cell: UnitCell,
    structure_index: str = DEFAULT_STRUCTURE_INDEX,
) -> Path:
    """Write ``atoms`` to an mmCIF file and return its path."""
    with MmCifWriter(path) as writer:
        writer.write_header(unit_cell, structure_index)
        for atom in atoms:
            writer.add_atom(atom)
    return writer.path
