"""
NASA 7-coeff polynomials (two temperature ranges) for reference-state cp, h, s.
Form (per NASA Glenn/CEA): cp/R = a1 + a2 T + a3 T^2 + a4 T^3 + a5 T^4
h/(RT) = a1 + a2 T/2 + a3 T^2/3 + a4 T^3/4 + a5 T^4/5 + a6/T
s/R = a1 ln T + a2 T + a3 T^2/2 + a4 T^3/3 + a5 T^4/4 + a7
Outside [Tmin, Tmax] the nearer range is extrapolated.
"""
from dataclasses import dataclass
from math import log
from typing import Any, Dict, Sequence

from mixthermo.common.constants import ONE_ATM
from mixthermo.common.exceptions import ConfigurationError, MissingPropertyData

from .records import CorrelationRecord
from .registry import register

N_COEFFS = 15


@dataclass
class NASA7Piece:
    # a1..a7 and valid range [Tmin, Tmax]
    a1: float; a2: float; a3: float; a4: float; a5: float; a6: float; a7: float
    Tmin: float; Tmax: float

    def coeffs(self):
        return (self.a1, self.a2, self.a3, self.a4, self.a5, self.a6, self.a7)


def _eval_piece(piece: NASA7Piece, T: float):
    a1, a2, a3, a4, a5, a6, a7 = piece.coeffs()
    T2 = T * T
    T3 = T2 * T
    T4 = T3 * T
    cp_R = a1 + a2*T + a3*T2 + a4*T3 + a5*T4
    h_RT = a1 + a2*T/2.0 + a3*T2/3.0 + a4*T3/4.0 + a5*T4/5.0 + a6/T
    s_R = a1*log(T) + a2*T + a3*T2/2.0 + a4*T3/3.0 + a5*T4/4.0 + a7
    return cp_R, h_RT, s_R


@register("nasa7")
@dataclass
class NASA7Species:
    """Coefficient layout: ``[Tmid, a1..a7 (low), a1..a7 (high)]``."""

    index: int
    low: NASA7Piece
    high: NASA7Piece
    Tmid: float
    p_ref: float = ONE_ATM
    name: str = ""

    @staticmethod
    def _split(index: int, t_min: float, t_max: float, coeffs: Sequence[float], name: str = ""):
        if len(coeffs) != N_COEFFS:
            raise ConfigurationError(
                f"NASA7 for {name or f'species {index}'}: expected {N_COEFFS} coefficients, got {len(coeffs)}"
            )
        c = [float(x) for x in coeffs]
        Tmid = c[0]
        if not (t_min < Tmid < t_max):
            raise ConfigurationError(
                f"NASA7 for {name or f'species {index}'}: Tmid={Tmid} K outside ({t_min}, {t_max}) K"
            )
        low = NASA7Piece(*c[1:8], Tmin=t_min, Tmax=Tmid)
        high = NASA7Piece(*c[8:15], Tmin=Tmid, Tmax=t_max)
        return low, high, Tmid

    @classmethod
    def from_record(cls, record: CorrelationRecord, **_) -> "NASA7Species":
        low, high, Tmid = cls._split(record.species_index, record.t_min, record.t_max, record.coeffs, record.name)
        return cls(index=record.species_index, low=low, high=high, Tmid=Tmid, p_ref=record.ref_pressure, name=record.name)

    @staticmethod
    def record_from_params(index: int, sp: Dict[str, Any], p_ref: float = ONE_ATM, name: str = "") -> CorrelationRecord:
        label = name or f"species {index}"
        for key in ("T_ranges", "low", "high"):
            if key not in sp:
                raise MissingPropertyData(f"Missing '{key}' in nasa7 params for {label}")
        for key, size in (("T_ranges", 3), ("low", 7), ("high", 7)):
            if not isinstance(sp[key], (list, tuple)) or len(sp[key]) != size:
                raise ConfigurationError(f"'{key}' in nasa7 params for {label} must hold {size} values: {sp[key]!r}")
        Tlow, Tmid, Thigh = sp["T_ranges"]
        if Tlow <= 0.0:
            raise ConfigurationError(f"'T_ranges' in nasa7 params for {label}: temperatures must be > 0 K")
        coeffs = (float(Tmid),) + tuple(float(a) for a in sp["low"]) + tuple(float(a) for a in sp["high"])
        return CorrelationRecord(
            species_index=index,
            kind="nasa7",
            t_min=float(Tlow),
            t_max=float(Thigh),
            ref_pressure=float(sp.get("p_ref", p_ref)),
            coeffs=coeffs,
            name=name,
        )

    def evaluate(self, T: float):
        piece = self.low if T <= self.Tmid else self.high
        return _eval_piece(piece, T)

    def update_properties(self, T: float, cp_R, h_RT, s_R) -> None:
        k = self.index
        cp_R[k], h_RT[k], s_R[k] = self.evaluate(T)

    def min_temp(self) -> float:
        return self.low.Tmin

    def max_temp(self) -> float:
        return self.high.Tmax

    def ref_pressure(self) -> float:
        return self.p_ref

    def report_parameters(self) -> CorrelationRecord:
        return CorrelationRecord(
            species_index=self.index,
            kind=self.kind,
            t_min=self.low.Tmin,
            t_max=self.high.Tmax,
            ref_pressure=self.p_ref,
            coeffs=(self.Tmid,) + self.low.coeffs() + self.high.coeffs(),
            name=self.name,
        )

    def modify_parameters(self, coeffs: Sequence[float]) -> None:
        self.low, self.high, self.Tmid = self._split(self.index, self.low.Tmin, self.high.Tmax, coeffs, self.name)
