"""Immutable parameter records handed over by the loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class CorrelationRecord:
    """Coefficients of one species' reference-state correlation.

    ``coeffs`` is dimensional (J/kmol based) and its layout depends on ``kind``.
    """

    species_index: int
    kind: str
    t_min: float
    t_max: float
    ref_pressure: float
    coeffs: Tuple[float, ...] = ()
    name: str = field(default="", compare=False)


@dataclass(frozen=True)
class BinaryInteraction:
    """Margules parameters ``(b, c)`` for one pair of neutral species.

    Energy pairs are J/kmol and J/kmol/K, volume pairs m^3/kmol and m^3/kmol/K.
    """

    species_a: int
    species_b: int
    h_excess: Tuple[float, float] = (0.0, 0.0)
    s_excess: Tuple[float, float] = (0.0, 0.0)
    vh_excess: Tuple[float, float] = (0.0, 0.0)
    vs_excess: Tuple[float, float] = (0.0, 0.0)
    label: str = field(default="", compare=False)
