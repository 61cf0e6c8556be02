import argparse
import sys
from pathlib import Path

from orbitviz.bake import CUTOFF, baked_path, bake_all, load_or_bake
from orbitviz.simulation import SimulationConfig
from orbitviz.ui.constants import VisC
from orbitviz.utils import Dir
from orbitviz.utils.data import OrbitConfigList


def view(args: argparse.Namespace) -> None:
    from orbitviz.ui import Visualization

    table = load_or_bake(
        orbits_file=args.orbits,
        config=SimulationConfig(kernel=args.kernel),
        rebake=args.rebake,
    )
    print(f"Loaded {len(table)} orbits: {', '.join(table.names)}")
    vis = Visualization(table=table, size=args.size)
    vis.start()


def bake(args: argparse.Namespace) -> None:
    config = SimulationConfig(
        frames=args.frames,
        subframes=args.subframes,
        substeps=args.substeps,
        integrator=args.integrator,
        kernel=args.kernel,
        closure_tolerance=args.tolerance,
    )
    table = bake_all(
        OrbitConfigList.load(args.orbits), config, args.cutoff, strict=args.strict
    )
    output = args.output or baked_path(args.orbits)
    table.dump(output)
    print(f"Wrote {len(table)} orbits to {output}")


def preview(args: argparse.Namespace) -> None:
    from orbitviz.bake.preview import render_previews

    table = load_or_bake(orbits_file=args.orbits)
    for path in render_previews(table, args.directory, args.frames):
        print(path)


def cli() -> None:
    parser = argparse.ArgumentParser(
        prog="orbitviz", description="Animate periodic three-body orbits"
    )
    parser.add_argument(
        "--orbits",
        type=Path,
        default=Dir.orbits,
        help="TOML file of orbit initial conditions (default: data/orbits.toml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    p_view = subparsers.add_parser("view", help="open the viewer (default)")
    p_view.add_argument(
        "--size", type=int, default=VisC.size, choices=VisC.sizes, help="canvas size [px]"
    )
    p_view.add_argument(
        "--rebake", action="store_true", help="bake again even if cached"
    )
    p_view.add_argument(
        "--kernel", default="numba", choices=["numpy", "numba"], help="force kernel"
    )
    p_view.set_defaults(func=view)

    p_bake = subparsers.add_parser("bake", help="bake orbits into Fourier series")
    p_bake.add_argument("--frames", type=int, default=140)
    p_bake.add_argument("--subframes", type=int, default=100)
    p_bake.add_argument(
        "--substeps", type=int, default=30, help="integrator steps per sample"
    )
    p_bake.add_argument(
        "--integrator",
        default="rk4",
        choices=["euler", "symplectic_euler", "rk4"],
    )
    p_bake.add_argument(
        "--kernel", default="numba", choices=["numpy", "numba"], help="force kernel"
    )
    p_bake.add_argument(
        "--cutoff", type=float, default=CUTOFF, help="smallest amplitude kept"
    )
    p_bake.add_argument(
        "--tolerance",
        type=float,
        default=1e-3,
        help="largest forward/backward mismatch accepted",
    )
    p_bake.add_argument(
        "--strict", action="store_true", help="fail on orbits that do not close"
    )
    p_bake.add_argument(
        "--output", type=Path, default=None, help="baked table (default: cache/baked/)"
    )
    p_bake.set_defaults(func=bake)

    p_preview = subparsers.add_parser("preview", help="render a GIF per orbit")
    p_preview.add_argument("--frames", type=int, default=140)
    p_preview.add_argument("--directory", type=Path, default=Dir.preview)
    p_preview.set_defaults(func=preview)

    args = parser.parse_args()
    if args.command is None:
        # Open the viewer with its defaults
        args = parser.parse_args([*sys.argv[1:], "view"])
    args.func(args)


if __name__ == "__main__":
    cli()
