"""Partial molar properties of a mixed-solvent solution.

Combines the constant-volume standard states with the Margules excess model:

    mu_k = mu_ss_k + RT (ln X_k + ln gamma_k)

Species bookkeeping (names, charges, mole fractions) belongs to the caller;
every method takes the composition explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from mixthermo.common.constants import DEFAULT_CONSTANTS, SMALL_NUMBER, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError, MissingPropertyData

from .impl.loader import build_model, build_species_thermo, interactions_from_params, load_model_from_json, model
from .impl.margules import MargulesExcessModel
from .impl.standard_state import ConstVolumeStandardState

logger = logging.getLogger(__name__)

Composition = Union[Mapping[str, float], Sequence[float], np.ndarray]


@dataclass
class MixedSolventMixture:
    """Standard state + binary Margules excess model for a set of neutral species."""

    species_names: List[str]
    standard_state: ConstVolumeStandardState
    excess: MargulesExcessModel
    charges: Optional[Sequence[float]] = None
    _charges: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        n = len(self.species_names)
        if self.standard_state.n_species != n or self.excess.n_species != n:
            raise ConfigurationError(
                f"Species count mismatch: {n} names, {self.standard_state.n_species} standard states, "
                f"{self.excess.n_species} in the excess model"
            )
        self._charges = np.zeros(n) if self.charges is None else np.asarray(self.charges, dtype=float)
        if self._charges.shape != (n,):
            raise ConfigurationError(f"Expected {n} species charges, got {self._charges.shape[0]}")

    @property
    def n_species(self) -> int:
        return len(self.species_names)

    @property
    def gas_constant(self) -> float:
        return self.standard_state.constants.gas_constant

    def species_index(self, name: str) -> int:
        try:
            return self.species_names.index(name)
        except ValueError:
            raise KeyError(f"Species '{name}' not in mixture") from None

    def mole_fractions(self, composition: Composition) -> np.ndarray:
        """Normalized mole fractions from a name mapping or an array in species order."""
        if isinstance(composition, Mapping):
            unknown = set(composition) - set(self.species_names)
            if unknown:
                raise KeyError(f"Species not in mixture: {sorted(unknown)}")
            X = np.array([float(composition.get(name, 0.0)) for name in self.species_names])
        else:
            X = np.asarray(composition, dtype=float)
            if X.shape != (self.n_species,):
                raise ValueError(f"Composition has shape {X.shape}, expected ({self.n_species},)")
        total = X.sum()
        if total <= 0.0:
            raise ValueError("Mixture composition contains no supported species")
        return X / total

    def _prepare(self, T: float, P: float, composition: Composition) -> np.ndarray:
        self.standard_state.set_state(T, P)
        return self.mole_fractions(composition)

    def ln_activity_coefficients(self, T: float, P: float, composition: Composition) -> np.ndarray:
        X = self._prepare(T, P, composition)
        return self.excess.ln_activity_coefficients(T, X)

    def activity_coefficients(self, T: float, P: float, composition: Composition) -> np.ndarray:
        X = self._prepare(T, P, composition)
        return self.excess.activity_coefficients(T, X)

    def activities(self, T: float, P: float, composition: Composition) -> np.ndarray:
        X = self._prepare(T, P, composition)
        return X * self.excess.activity_coefficients(T, X)

    def chemical_potentials(self, T: float, P: float, composition: Composition) -> np.ndarray:
        """mu_k [J/kmol]."""
        X = self._prepare(T, P, composition)
        mu = self.standard_state.get_standard_chem_potentials()
        RT = self.gas_constant * T
        ln_gamma = self.excess.ln_activity_coefficients(T, X)
        mu += RT * (np.log(np.maximum(X, SMALL_NUMBER)) + ln_gamma)
        return mu

    def electrochemical_potentials(
        self, T: float, P: float, composition: Composition, electric_potential: float = 0.0
    ) -> np.ndarray:
        mu = self.chemical_potentials(T, P, composition)
        mu += self.standard_state.constants.faraday * electric_potential * self._charges
        return mu

    def partial_molar_enthalpies(self, T: float, P: float, composition: Composition) -> np.ndarray:
        """h_k [J/kmol]."""
        X = self._prepare(T, P, composition)
        RT = self.gas_constant * T
        hbar = self.standard_state.get_enthalpy_RT() * RT
        hbar -= RT * T * self.excess.dln_act_coeff_dT(T, X)
        return hbar

    def partial_molar_entropies(self, T: float, P: float, composition: Composition) -> np.ndarray:
        """s_k [J/kmol/K]."""
        X = self._prepare(T, P, composition)
        sbar = self.standard_state.get_entropy_R()
        sbar -= self.excess.ln_activity_coefficients(T, X)
        sbar -= np.log(np.maximum(X, SMALL_NUMBER))
        sbar -= T * self.excess.dln_act_coeff_dT(T, X)
        return sbar * self.gas_constant

    def partial_molar_cp(self, T: float, P: float, composition: Composition) -> np.ndarray:
        """cp_k [J/kmol/K]."""
        X = self._prepare(T, P, composition)
        cpbar = self.standard_state.get_cp_R()
        cpbar -= 2.0 * T * self.excess.dln_act_coeff_dT(T, X) + T * T * self.excess.d2ln_act_coeff_dT2(T, X)
        return cpbar * self.gas_constant

    def partial_molar_volumes(self, T: float, P: float, composition: Composition) -> np.ndarray:
        """v_k [m^3/kmol]."""
        X = self._prepare(T, P, composition)
        vbar = self.standard_state.get_standard_volumes()
        vbar += self.excess.excess_partial_molar_volumes(T, X)
        return vbar

    def _mole_average(self, X: np.ndarray, partial: np.ndarray) -> float:
        return float(np.dot(X, partial))

    def enthalpy_mole(self, T: float, P: float, composition: Composition) -> float:
        X = self.mole_fractions(composition)
        return self._mole_average(X, self.partial_molar_enthalpies(T, P, X))

    def entropy_mole(self, T: float, P: float, composition: Composition) -> float:
        X = self.mole_fractions(composition)
        return self._mole_average(X, self.partial_molar_entropies(T, P, X))

    def cp_mole(self, T: float, P: float, composition: Composition) -> float:
        X = self.mole_fractions(composition)
        return self._mole_average(X, self.partial_molar_cp(T, P, X))

    def cv_mole(self, T: float, P: float, composition: Composition) -> float:
        return self.cp_mole(T, P, composition) - self.gas_constant

    def gibbs_mole(self, T: float, P: float, composition: Composition) -> float:
        X = self.mole_fractions(composition)
        return self._mole_average(X, self.chemical_potentials(T, P, X))

    def volume_mole(self, T: float, P: float, composition: Composition) -> float:
        X = self.mole_fractions(composition)
        return self._mole_average(X, self.partial_molar_volumes(T, P, X))

    def state(self, T: float, P: float, composition: Composition) -> Dict[str, float]:
        """Mixture molar properties at (T, P, composition)."""
        X = self.mole_fractions(composition)
        v = self.volume_mole(T, P, X)
        h = self.enthalpy_mole(T, P, X)
        cp = self.cp_mole(T, P, X)
        return {
            "T": T,
            "P": P,
            "h_molar": h,
            "s_molar": self.entropy_mole(T, P, X),
            "g_molar": self.gibbs_mole(T, P, X),
            "cp_molar": cp,
            "cv_molar": cp - self.gas_constant,
            "v_molar": v,
            "u_molar": h - P * v,
            "rho_molar": 1.0 / v if v > 0.0 else float("nan"),
            "g_excess_RT": self.excess.excess_gibbs_RT(T, X),
        }

    def ln_gamma_table(self, T: float, P: float, composition: Composition) -> Dict[str, float]:
        ln_gamma = self.ln_activity_coefficients(T, P, composition)
        return {name: float(v) for name, v in zip(self.species_names, ln_gamma)}


@model("mixed_solvent_margules")
def _build_mixed_solvent_mixture(
    params: Dict[str, Any],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
    states: Optional[Mapping[str, Any]] = None,
) -> MixedSolventMixture:
    species = params.get("species")
    if not species:
        raise MissingPropertyData("Missing 'species' in mixed_solvent_margules params")
    names = [sp.get("name", f"species {k}") for k, sp in enumerate(species)]
    charges = [float(sp.get("charge", 0.0)) for sp in species]
    sp_thermo = build_species_thermo(species, constants=constants, states=states)
    standard_state = ConstVolumeStandardState.from_params(sp_thermo, species, constants=constants)
    interactions = interactions_from_params(params.get("interactions", []), names, charges)
    excess = MargulesExcessModel(len(names), interactions, constants=constants)
    logger.info("Built mixed-solvent mixture: %d species, %d binary interactions", len(names), len(interactions))
    return MixedSolventMixture(species_names=names, standard_state=standard_state, excess=excess, charges=charges)


def _coerce_path(path: Union[str, Path]) -> Path:
    return path if isinstance(path, Path) else Path(path)


def build_mixed_solvent_mixture(
    params: Dict[str, Any],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
    states: Optional[Mapping[str, Any]] = None,
) -> MixedSolventMixture:
    return build_model("mixed_solvent_margules", params, constants=constants, states=states)


def load_mixed_solvent_mixture(
    json_path: Union[str, Path],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
    states: Optional[Mapping[str, Any]] = None,
) -> MixedSolventMixture:
    mixture = load_model_from_json(str(_coerce_path(json_path)), constants=constants, states=states)
    if not isinstance(mixture, MixedSolventMixture):
        raise TypeError("JSON did not yield a MixedSolventMixture instance")
    return mixture
