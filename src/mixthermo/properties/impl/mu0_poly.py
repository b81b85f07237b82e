"""
Piecewise-constant-cp reference state built from a table of mu0(T) points.

The table gives mu0 = h - T s at a set of temperatures, one of which must be
298.15 K where h = H298 is known. Between two points cp is taken constant,
which fixes it from the mu0 difference and the entropy at the known end:

    mu2 - mu1 = cp (T2 - T1) - T2 (s1 + cp ln(T2/T1)) + T1 s1

Walking up and down from the 298.15 K anchor gives h, s at every point;
h and s are continuous across points, cp jumps.
"""

from __future__ import annotations

import logging
from math import log
from typing import Any, Dict, List, Sequence

from mixthermo.common.constants import DEFAULT_CONSTANTS, ONE_ATM, PhysicalConstants, T_REF
from mixthermo.common.exceptions import ConfigurationError, MissingPropertyData

from ..utils.units import energy_factor
from .records import CorrelationRecord
from .registry import register

logger = logging.getLogger(__name__)

DIMENSIONLESS = "Dimensionless"
DIMENSIONLESS_T = 273.15  # K, temperature dimensionless mu0 tables are quoted at


@register("mu0")
class Mu0Poly:
    """Reference-state correlation interpolating a table of mu0 values.

    Coefficient layout: ``[n_points, H298, T_0, mu0_0, T_1, mu0_1, ...]``
    with H298 and mu0 in J/kmol (scaled by ``constants.gas_constant``).
    """

    def __init__(
        self,
        index: int,
        t_min: float,
        t_max: float,
        p_ref: float,
        coeffs: Sequence[float],
        name: str = "",
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ):
        self.index = index
        self.name = name
        self.constants = constants
        self._t_min = float(t_min)
        self._t_max = float(t_max)
        self._p_ref = float(p_ref)
        self._process_coeffs(coeffs)

    @classmethod
    def from_record(cls, record: CorrelationRecord, constants: PhysicalConstants = DEFAULT_CONSTANTS, **_) -> "Mu0Poly":
        return cls(
            record.species_index,
            record.t_min,
            record.t_max,
            record.ref_pressure,
            record.coeffs,
            name=record.name,
            constants=constants,
        )

    @classmethod
    def from_points(
        cls,
        index: int,
        points: Sequence[Sequence[float]],
        h298: float,
        t_min: float,
        t_max: float,
        p_ref: float,
        **kwargs,
    ) -> "Mu0Poly":
        """Build from ``[(T, mu0), ...]`` pairs in J/kmol."""
        coeffs: List[float] = [float(len(points)), float(h298)]
        for T, mu0 in points:
            coeffs.extend((float(T), float(mu0)))
        return cls(index, t_min, t_max, p_ref, coeffs, **kwargs)

    @staticmethod
    def record_from_params(index: int, sp: Dict[str, Any], p_ref: float = ONE_ATM, name: str = "") -> CorrelationRecord:
        """Params form: ``{"t_min", "t_max", "h298", "points": [[T, mu0], ...], "units"}``.

        ``units: "Dimensionless"`` reads each mu0 as a value given at 273.15 K and
        rescales it by ``T / 273.15``; ``h298`` is then taken in J/kmol.
        """
        label = name or f"species {index}"
        for key in ("t_min", "t_max", "points"):
            if key not in sp:
                raise MissingPropertyData(f"Missing '{key}' in mu0 params for {label}")
        units = sp.get("units", "J/kmol")
        dimensionless = units == DIMENSIONLESS
        factor = 1.0 if dimensionless else energy_factor(units, what=f"mu0 energy ({label})")
        points = sp["points"]
        if not isinstance(points, (list, tuple)):
            raise ConfigurationError(f"'points' in mu0 params for {label} must be a list of [T, mu0] pairs")
        if "num_points" in sp and int(sp["num_points"]) != len(points):
            raise ConfigurationError(
                f"num_points={sp['num_points']} inconsistent with {len(points)} mu0 values for {label}"
            )
        coeffs = [float(len(points)), float(sp.get("h298", 0.0)) * factor]
        for i, point in enumerate(points):
            if not isinstance(point, (list, tuple)) or len(point) != 2:
                raise ConfigurationError(f"'points'[{i}] in mu0 params for {label} is not a [T, mu0] pair: {point!r}")
            T, mu0 = float(point[0]), float(point[1])
            if dimensionless:
                mu0 *= T / DIMENSIONLESS_T
            coeffs.extend((T, mu0 * factor))
        return CorrelationRecord(
            species_index=index,
            kind="mu0",
            t_min=float(sp["t_min"]),
            t_max=float(sp["t_max"]),
            ref_pressure=float(sp.get("p_ref", p_ref)),
            coeffs=tuple(coeffs),
            name=name,
        )

    @property
    def _label(self) -> str:
        return self.name or f"species {self.index}"

    def _process_coeffs(self, coeffs: Sequence[float]) -> None:
        coeffs = [float(c) for c in coeffs]
        if len(coeffs) < 2:
            raise ConfigurationError(f"Mu0Poly for {self._label}: coefficient vector too short")
        n_points = int(coeffs[0])
        if n_points < 2:
            raise ConfigurationError(f"Mu0Poly for {self._label}: n_points must be >= 2, got {n_points}")
        if len(coeffs) != 2 + 2 * n_points:
            raise ConfigurationError(
                f"Mu0Poly for {self._label}: n_points={n_points} inconsistent with "
                f"{(len(coeffs) - 2) / 2:g} (T, mu0) pairs supplied"
            )
        R = self.constants.gas_constant
        t0 = coeffs[2::2]
        mu0_R = [mu / R for mu in coeffs[3::2]]

        i298 = None
        for i, T in enumerate(t0):
            if T == T_REF:
                i298 = i
            if i + 1 < n_points and t0[i + 1] <= T:
                raise ConfigurationError(
                    f"Mu0Poly for {self._label}: temperatures are not monotonic increasing "
                    f"({t0[i + 1]} K follows {T} K)"
                )
        if t0[0] <= 0.0:
            raise ConfigurationError(f"Mu0Poly for {self._label}: breakpoint temperatures must be > 0 K, got {t0[0]} K")
        if i298 is None:
            raise ConfigurationError(f"Mu0Poly for {self._label}: one temperature has to be {T_REF} K")

        n_intervals = n_points - 1
        h298 = coeffs[1] / R
        h0 = [0.0] * n_points
        s0 = [0.0] * n_points
        cp0 = [0.0] * n_points
        h0[i298] = h298
        s0[i298] = -(mu0_R[i298] - h298) / t0[i298]

        # up from the anchor
        for i in range(i298, n_intervals):
            T1, T2 = t0[i], t0[i + 1]
            s1, h1 = s0[i], h0[i]
            delta_mu = mu0_R[i + 1] - mu0_R[i]
            delta_T = T2 - T1
            cpi = (delta_mu - T1 * s1 + T2 * s1) / (delta_T - T2 * log(T2 / T1))
            h0[i + 1] = h1 + cpi * delta_T
            s0[i + 1] = s1 + cpi * log(T2 / T1)
            cp0[i] = cpi
            cp0[i + 1] = cpi

        # down from the anchor
        for i in range(i298 - 1, -1, -1):
            T1, T2 = t0[i], t0[i + 1]
            s2, h2 = s0[i + 1], h0[i + 1]
            delta_mu = mu0_R[i + 1] - mu0_R[i]
            delta_T = T2 - T1
            cpi = (delta_mu - T1 * s2 + T2 * s2) / (delta_T - T1 * log(T2 / T1))
            h0[i] = h2 - cpi * delta_T
            s0[i] = s2 - cpi * log(T2 / T1)
            cp0[i] = cpi
            if i == n_intervals - 1:
                cp0[i + 1] = cpi

        self._n_intervals = n_intervals
        self._h298 = h298
        self._t0 = t0
        self._mu0_R = mu0_R
        self._h0_R = h0
        self._s0_R = s0
        self._cp0_R = cp0
        logger.debug(
            "Mu0Poly %s: %d points, anchor at index %d, cp/R per interval %s",
            self._label, n_points, i298, cp0[:n_intervals],
        )

    def _interval(self, T: float) -> int:
        for i in range(self._n_intervals):
            if T <= self._t0[i + 1]:
                return i
        return self._n_intervals

    def evaluate(self, T: float):
        """Return ``(cp_R, h_RT, s_R)`` at ``T``."""
        j = self._interval(T)
        T1 = self._t0[j]
        cp_R = self._cp0_R[j]
        h_RT = (self._h0_R[j] + (T - T1) * cp_R) / T
        s_R = self._s0_R[j] + cp_R * log(T / T1)
        return cp_R, h_RT, s_R

    def update_properties(self, T: float, cp_R, h_RT, s_R) -> None:
        k = self.index
        cp_R[k], h_RT[k], s_R[k] = self.evaluate(T)

    def min_temp(self) -> float:
        return self._t_min

    def max_temp(self) -> float:
        return self._t_max

    def ref_pressure(self) -> float:
        return self._p_ref

    def report_parameters(self) -> CorrelationRecord:
        R = self.constants.gas_constant
        coeffs = [float(self._n_intervals + 1), self._h298 * R]
        for T, mu in zip(self._t0, self._mu0_R):
            coeffs.extend((T, mu * R))
        return CorrelationRecord(
            species_index=self.index,
            kind=self.kind,
            t_min=self._t_min,
            t_max=self._t_max,
            ref_pressure=self._p_ref,
            coeffs=tuple(coeffs),
            name=self.name,
        )

    def modify_parameters(self, coeffs: Sequence[float]) -> None:
        self._process_coeffs(coeffs)

    def breakpoints(self):
        """Tabulated ``(T, h/R, s/R, cp/R)`` at each point, cp of the interval starting there."""
        return list(zip(self._t0, self._h0_R, self._s0_R, self._cp0_R))
