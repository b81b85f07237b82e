"""Per-species reference-state correlations indexed by species position."""

from __future__ import annotations

import copy
import logging
from typing import List, Optional, Sequence

import numpy as np

from mixthermo.common.constants import DEFAULT_CONSTANTS, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError

from . import delegated, mu0_poly, nasa7  # noqa: F401  (registers the correlation kinds)
from .records import CorrelationRecord
from .registry import SpeciesCorrelation, build

logger = logging.getLogger(__name__)


class SpeciesThermo:
    """Owns one correlation per species slot and updates them together.

    Temperatures outside a correlation's range are extrapolated silently;
    callers that need strict bounds check :meth:`min_temp` / :meth:`max_temp`.
    """

    def __init__(self, n_species: int, constants: PhysicalConstants = DEFAULT_CONSTANTS):
        if n_species < 0:
            raise ConfigurationError("n_species must be >= 0")
        self.constants = constants
        self._slots: List[Optional[SpeciesCorrelation]] = [None] * n_species

    @property
    def n_species(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, k: int) -> SpeciesCorrelation:
        return self._get(k)

    def _check_index(self, k: int) -> None:
        if not 0 <= k < len(self._slots):
            raise ConfigurationError(f"Species index {k} out of range for {len(self._slots)} species")

    def _get(self, k: int) -> SpeciesCorrelation:
        self._check_index(k)
        model = self._slots[k]
        if model is None:
            raise ConfigurationError(f"No reference-state correlation installed for species {k}")
        return model

    def install(self, model: SpeciesCorrelation) -> None:
        self._check_index(model.index)
        if self._slots[model.index] is not None:
            logger.debug("Replacing %s correlation for species %d", self._slots[model.index].kind, model.index)
        self._slots[model.index] = model

    def install_record(self, record: CorrelationRecord, **context) -> SpeciesCorrelation:
        context.setdefault("constants", self.constants)
        model = build(record, **context)
        self.install(model)
        logger.debug("Installed %s correlation for species %d (%s)", record.kind, record.species_index, record.name)
        return model

    def is_complete(self) -> bool:
        return all(m is not None for m in self._slots)

    def missing(self) -> List[int]:
        return [k for k, m in enumerate(self._slots) if m is None]

    def update(self, T: float, cp_R: np.ndarray, h_RT: np.ndarray, s_R: np.ndarray) -> None:
        """Write cp/R, h/RT, s/R of every species at ``T`` into the given arrays."""
        for k, model in enumerate(self._slots):
            if model is None:
                raise ConfigurationError(f"No reference-state correlation installed for species {k}")
            model.update_properties(T, cp_R, h_RT, s_R)

    def update_one(self, k: int, T: float, cp_R: np.ndarray, h_RT: np.ndarray, s_R: np.ndarray) -> None:
        self._get(k).update_properties(T, cp_R, h_RT, s_R)

    def min_temp(self, k: Optional[int] = None) -> float:
        """Lowest valid T of species ``k``, or of all species together."""
        if k is not None:
            return self._get(k).min_temp()
        return max((self._get(j).min_temp() for j in range(len(self._slots))), default=0.0)

    def max_temp(self, k: Optional[int] = None) -> float:
        if k is not None:
            return self._get(k).max_temp()
        return min((self._get(j).max_temp() for j in range(len(self._slots))), default=float("inf"))

    def ref_pressure(self, k: Optional[int] = None) -> float:
        if k is not None:
            return self._get(k).ref_pressure()
        prefs = {self._get(j).ref_pressure() for j in range(len(self._slots))}
        if len(prefs) > 1:
            raise ConfigurationError(f"Species correlations disagree on the reference pressure: {sorted(prefs)}")
        return prefs.pop() if prefs else self.constants.one_atm

    def report_parameters(self, k: int) -> CorrelationRecord:
        return self._get(k).report_parameters()

    def modify_parameters(self, k: int, coeffs: Sequence[float]) -> None:
        self._get(k).modify_parameters(coeffs)

    def duplicate(self) -> "SpeciesThermo":
        return copy.deepcopy(self)
