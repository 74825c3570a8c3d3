"""
Command-line entry point.

    nanoparticle-geometry build --shape cube --radius 20 --element Au \\
        --lattice-constant 4.078 -o gold_cube.cif
    nanoparticle-geometry shapes
"""

import argparse
import logging
import sys
from typing import Sequence

from .config import DEFAULT_PRECISION, DEFAULT_STRUCTURE_INDEX
from .errors import NanoparticleGeometryError
from .lattice import UnitCell
from .logging_config import setup_logging
from .mmcif import write_mmcif
from .pipeline import build_nanoparticle
from .shapes import list_shapes

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nanoparticle-geometry",
        description="Carve crystalline nanoparticles out of a lattice and write them as mmCIF.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", help="Also write log messages to this file")
    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", help="Build a nanoparticle and write it as mmCIF")
    b.add_argument("--shape", required=True, help="Shape name, see the 'shapes' command")
    b.add_argument(
        "--radius", required=True,
        help="Circumradius in Å: center to the farthest vertex (a cube's half-edge is radius / sqrt(3))",
    )
    b.add_argument("--element", required=True, help="Element symbol of the FCC basis atoms")
    b.add_argument("--lattice-constant", required=True, help="FCC cell edge in Å")
    b.add_argument("--atomic-radius", default="0", help="Atomic radius in Å")
    b.add_argument("--charge", type=int, default=0, help="Formal charge of each atom")
    b.add_argument("--precision", type=int, default=DEFAULT_PRECISION,
                   help="Significant digits for all arithmetic")
    b.add_argument("--structure-index", default=DEFAULT_STRUCTURE_INDEX,
                   help="mmCIF data block / entry id")
    b.add_argument("-o", "--output", default="nanoparticle.cif", help="Output file")

    sub.add_parser("shapes", help="List available shapes")
    return p


def _build(args: argparse.Namespace) -> int:
    cell = UnitCell.fcc(
        args.lattice_constant,
        args.element,
        charges=args.charge,
        radii=args.atomic_radius,
        precision=args.precision,
    )
    atoms = build_nanoparticle(args.shape, args.radius, cell)
    path = write_mmcif(args.output, atoms, cell, args.structure_index)
    print(f"{len(atoms)} atoms written to {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    if args.command == "shapes":
        for name in list_shapes():
            print(name)
        return 0

    try:
        return _build(args)
    except (NanoparticleGeometryError, KeyError, ValueError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
