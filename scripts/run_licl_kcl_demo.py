"""Activity coefficients and molar properties of the KCl(L)-LiCl(L) melt over a composition sweep."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mixthermo.properties import load_mixed_solvent_mixture


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--params", default=ROOT / "data/props/licl_kcl_margules.json", type=Path,
                        help="Mixture JSON ({model, params})")
    parser.add_argument("--T", type=float, default=900.0, help="Temperature [K]")
    parser.add_argument("--P", type=float, default=101325.0, help="Pressure [Pa]")
    parser.add_argument("--points", type=int, default=9, help="Number of interior KCl mole fractions")
    parser.add_argument("--summary", action="store_true", help="Print the equimolar state as formatted JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    mixture = load_mixed_solvent_mixture(args.params)
    a, b = mixture.species_names[:2]
    print(f"T = {args.T:.2f} K, P = {args.P:.0f} Pa")
    print(f"{'X_' + a:>10} {'ln g_' + a:>14} {'ln g_' + b:>14} {'G^E/RT':>10} {'v [m3/kmol]':>12}")
    for x in np.linspace(0.0, 1.0, args.points + 2)[1:-1]:
        X = {a: x, b: 1.0 - x}
        ln_gamma = mixture.ln_activity_coefficients(args.T, args.P, X)
        state = mixture.state(args.T, args.P, X)
        print(f"{x:10.3f} {ln_gamma[0]:14.6f} {ln_gamma[1]:14.6f} {state['g_excess_RT']:10.5f} {state['v_molar']:12.6f}")
    if args.summary:
        print(json.dumps(mixture.state(args.T, args.P, {a: 0.5, b: 0.5}), indent=2))


if __name__ == "__main__":
    main()
