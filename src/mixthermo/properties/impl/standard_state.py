"""
Standard states with a constant molar volume.

With V independent of T and P the volumetric expansivity is zero, so only
the enthalpy (and Gibbs energy) pick up a pressure correction:

    h_ss/RT = h_ref/RT + (P - P_ref) V / (R T)
    cp_ss/R = cp_ref/R,   s_ss/R = s_ref/R
    g_ss/RT = h_ss/RT - s_ss/R

Results are cached for the last (T, P); a new evaluation happens only when
either value differs from the cached one.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from mixthermo.common.constants import DEFAULT_CONSTANTS, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError, MissingPropertyData, UnsupportedOperationError

from ..utils.units import volume_factor
from .species_thermo import SpeciesThermo

logger = logging.getLogger(__name__)

CONSTANT_VOLUME_MODELS = ("constant_incompressible", "constantVolume")


def standard_volume_from_params(species_name: str, params: Mapping[str, Any]) -> float:
    """Molar volume [m^3/kmol] from a ``standard_state`` params block."""
    model = params.get("model")
    if model not in CONSTANT_VOLUME_MODELS:
        raise ConfigurationError(
            f"standardState model '{model}' for species '{species_name}' isn't constant_incompressible"
        )
    if "molar_volume" not in params:
        raise MissingPropertyData(f"Missing 'molar_volume' in standard_state of species '{species_name}'")
    factor = volume_factor(params.get("units", "m3/kmol"), what=f"molar volume ({species_name})")
    return float(params["molar_volume"]) * factor


def _copy_out(src: np.ndarray, out: Optional[np.ndarray], scale: float = 1.0) -> np.ndarray:
    if out is None:
        return src * scale if scale != 1.0 else src.copy()
    if scale != 1.0:
        np.multiply(src, scale, out=out[: len(src)])
    else:
        out[: len(src)] = src
    return out


class ConstVolumeStandardState:
    """Standard-state manager layering a constant-volume pressure term on the reference state."""

    def __init__(
        self,
        species_thermo: SpeciesThermo,
        molar_volumes: Sequence[float],
        constants: Optional[PhysicalConstants] = None,
        use_ref_storage: bool = True,
        use_standard_storage: bool = True,
    ):
        n = species_thermo.n_species
        if len(molar_volumes) != n:
            raise ConfigurationError(f"Expected {n} molar volumes, got {len(molar_volumes)}")
        if not species_thermo.is_complete():
            raise ConfigurationError(f"Reference-state correlations missing for species {species_thermo.missing()}")
        self.species_thermo = species_thermo
        self.constants = constants or species_thermo.constants
        self.use_ref_storage = use_ref_storage
        self.use_standard_storage = use_standard_storage
        self.p_ref = species_thermo.ref_pressure() if n else self.constants.one_atm

        self._V = np.asarray(molar_volumes, dtype=float).copy()
        self._h0_RT = np.zeros(n)
        self._cp0_R = np.zeros(n)
        self._s0_R = np.zeros(n)
        self._g0_RT = np.zeros(n)
        self._hss_RT = np.zeros(n)
        self._cpss_R = np.zeros(n)
        self._sss_R = np.zeros(n)
        self._gss_RT = np.zeros(n)
        self._t_last: Optional[float] = None
        self._p_last: Optional[float] = None
        self.n_ref_updates = 0
        self.n_standard_updates = 0

    @property
    def n_species(self) -> int:
        return len(self._V)

    @property
    def temperature(self) -> Optional[float]:
        return self._t_last

    @property
    def pressure(self) -> Optional[float]:
        return self._p_last

    def set_state(self, T: float, P: float) -> None:
        """Bring the cache to (T, P); no work when both equal the cached values."""
        t_changed = T != self._t_last
        if t_changed:
            self._update_ref_state(T)
        if t_changed or P != self._p_last:
            self._p_last = P
            self._update_standard_state()

    def set_temperature(self, T: float) -> None:
        self.set_state(T, self._p_last if self._p_last is not None else self.p_ref)

    def set_pressure(self, P: float) -> None:
        if self._t_last is None:
            raise UnsupportedOperationError("Set a temperature before setting the pressure")
        self.set_state(self._t_last, P)

    def _update_ref_state(self, T: float) -> None:
        self.species_thermo.update(T, self._cp0_R, self._h0_RT, self._s0_R)
        np.subtract(self._h0_RT, self._s0_R, out=self._g0_RT)
        self._t_last = T
        self.n_ref_updates += 1

    def _update_standard_state(self) -> None:
        del_pRT = (self._p_last - self.p_ref) / (self.constants.gas_constant * self._t_last)
        np.add(self._h0_RT, del_pRT * self._V, out=self._hss_RT)
        self._cpss_R[:] = self._cp0_R
        self._sss_R[:] = self._s0_R
        np.subtract(self._hss_RT, self._sss_R, out=self._gss_RT)
        self.n_standard_updates += 1

    def _require_state(self) -> None:
        if self._t_last is None:
            raise UnsupportedOperationError("Standard state queried before set_state(T, P)")

    def _require_ref_storage(self, what: str) -> None:
        if not self.use_ref_storage:
            raise UnsupportedOperationError(f"{what}: unimplemented without reference-state storage")

    def _require_standard_storage(self, what: str) -> None:
        if not self.use_standard_storage:
            raise UnsupportedOperationError(f"{what}: unimplemented without standard-state storage")

    # standard state at (T, P)
    def get_enthalpy_RT(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_state()
        return _copy_out(self._hss_RT, out)

    def get_entropy_R(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_state()
        return _copy_out(self._sss_R, out)

    def get_cp_R(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_state()
        return _copy_out(self._cpss_R, out)

    def get_gibbs_RT(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_state()
        return _copy_out(self._gss_RT, out)

    def get_standard_chem_potentials(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        """mu_ss [J/kmol]."""
        self._require_state()
        return _copy_out(self._gss_RT, out, self.constants.gas_constant * self._t_last)

    def get_int_energy_RT(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_state()
        out = _copy_out(self._hss_RT, out)
        n = self.n_species
        out[:n] -= self._p_last * self._V / (self.constants.gas_constant * self._t_last)
        return out

    def get_standard_volumes(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_standard_storage("get_standard_volumes")
        return _copy_out(self._V, out)

    # reference state at (T, P_ref)
    def get_enthalpy_RT_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_ref_storage("get_enthalpy_RT_ref")
        self._require_state()
        return _copy_out(self._h0_RT, out)

    def get_entropy_R_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_ref_storage("get_entropy_R_ref")
        self._require_state()
        return _copy_out(self._s0_R, out)

    def get_cp_R_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_ref_storage("get_cp_R_ref")
        self._require_state()
        return _copy_out(self._cp0_R, out)

    def get_gibbs_RT_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_ref_storage("get_gibbs_RT_ref")
        self._require_state()
        return _copy_out(self._g0_RT, out)

    def get_gibbs_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        """g_ref [J/kmol]."""
        self._require_ref_storage("get_gibbs_ref")
        self._require_state()
        return _copy_out(self._g0_RT, out, self.constants.gas_constant * self._t_last)

    def get_standard_volumes_ref(self, out: Optional[np.ndarray] = None) -> np.ndarray:
        self._require_standard_storage("get_standard_volumes_ref")
        return _copy_out(self._V, out)

    @classmethod
    def from_params(
        cls,
        species_thermo: SpeciesThermo,
        species: Sequence[Mapping[str, Any]],
        **kwargs,
    ) -> "ConstVolumeStandardState":
        """``species``: list of ``{"name", "standard_state": {"model", "molar_volume", "units"}}``."""
        volumes = []
        for sp in species:
            name = sp.get("name", f"species {len(volumes)}")
            if "standard_state" not in sp:
                raise MissingPropertyData(f"no standard_state entry for species '{name}'")
            volumes.append(standard_volume_from_params(name, sp["standard_state"]))
        logger.debug("Constant-volume standard states: %s", volumes)
        return cls(species_thermo, volumes, **kwargs)
