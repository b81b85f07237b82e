r"""
Binary Margules excess Gibbs energy for neutral species.

Each interaction record i between species A and B contributes

.. math::

    G^E_i / RT = X_A X_B (g_0 + g_1 X_B),\qquad
    g_0 = (H_b - T S_b)/RT,\quad g_1 = (H_c - T S_c)/RT

and the activity coefficient of species k picks up

.. math::

    \ln\gamma_k \mathrel{+}= (\delta_{Ak} X_B + X_A \delta_{Bk} - X_A X_B)(g_0 + g_1 X_B)
        + X_A X_B (\delta_{Bk} - X_B) g_1 .

Records are summed in insertion order. Every quantity is recomputed from
(T, X) on each call; the work is one vectorized pass per record (one
``n x n`` update per record for the full composition Jacobian).
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from mixthermo.common.constants import DEFAULT_CONSTANTS, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError

from .records import BinaryInteraction

logger = logging.getLogger(__name__)


class MargulesExcessModel:
    """Activity coefficients and their derivatives from binary Margules records."""

    def __init__(
        self,
        n_species: int,
        interactions: Iterable[BinaryInteraction] = (),
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ):
        self.n_species = n_species
        self.constants = constants
        self._interactions: List[BinaryInteraction] = []
        for rec in interactions:
            self.add_interaction(rec)

    @property
    def interactions(self) -> List[BinaryInteraction]:
        return list(self._interactions)

    def add_interaction(self, rec: BinaryInteraction) -> None:
        for idx in (rec.species_a, rec.species_b):
            if not 0 <= idx < self.n_species:
                raise ConfigurationError(
                    f"Binary interaction {rec.label or (rec.species_a, rec.species_b)}: "
                    f"species index {idx} out of range for {self.n_species} species"
                )
        if rec.species_a == rec.species_b:
            raise ConfigurationError(
                f"Binary interaction {rec.label or (rec.species_a, rec.species_b)} pairs a species with itself"
            )
        for what in ("h_excess", "s_excess", "vh_excess", "vs_excess"):
            if len(getattr(rec, what)) != 2:
                raise ConfigurationError(
                    f"Binary interaction {rec.label or (rec.species_a, rec.species_b)}: "
                    f"wrong number of params found for {what}"
                )
        self._interactions.append(rec)
        logger.debug("Margules interaction %d: %s", len(self._interactions) - 1, rec)

    def _x(self, X: Sequence[float]) -> np.ndarray:
        X = np.asarray(X, dtype=float)
        if X.shape != (self.n_species,):
            raise ValueError(f"Mole fraction vector has shape {X.shape}, expected ({self.n_species},)")
        return X

    def _out(self, out: Optional[np.ndarray], shape) -> np.ndarray:
        if out is None:
            return np.zeros(shape)
        out[...] = 0.0
        return out

    def _terms(self, X: np.ndarray):
        """Per record: indices, mole fractions and the (delta - X) vectors over species."""
        n = self.n_species
        for rec in self._interactions:
            iA, iB = rec.species_a, rec.species_b
            XA, XB = X[iA], X[iB]
            dA = np.zeros(n)
            dA[iA] = 1.0
            dB = np.zeros(n)
            dB[iB] = 1.0
            yield rec, XA, XB, dA, dB

    def _g(self, rec: BinaryInteraction, T: float):
        RT = self.constants.gas_constant * T
        g0 = (rec.h_excess[0] - T * rec.s_excess[0]) / RT
        g1 = (rec.h_excess[1] - T * rec.s_excess[1]) / RT
        return g0, g1

    @staticmethod
    def _structure(XA, XB, dA, dB, g0, g1) -> np.ndarray:
        return (dA * XB + XA * dB - XA * XB) * (g0 + g1 * XB) + XA * XB * (dB - XB) * g1

    def ln_activity_coefficients(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        X = self._x(X)
        ln_gamma = self._out(out, self.n_species)
        for rec, XA, XB, dA, dB in self._terms(X):
            g0, g1 = self._g(rec, T)
            ln_gamma += self._structure(XA, XB, dA, dB, g0, g1)
        return ln_gamma

    def activity_coefficients(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        ln_gamma = self.ln_activity_coefficients(T, X, out=out)
        return np.exp(ln_gamma, out=ln_gamma)

    def _dT_terms(self, T: float, X: np.ndarray, first: np.ndarray, second: Optional[np.ndarray]) -> None:
        RTT = self.constants.gas_constant * T * T
        for rec, XA, XB, dA, dB in self._terms(X):
            g0 = -rec.h_excess[0] / RTT
            g1 = -rec.h_excess[1] / RTT
            term = self._structure(XA, XB, dA, dB, g0, g1)
            first += term
            if second is not None:
                second -= 2.0 * term / T

    def dln_act_coeff_dT(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        X = self._x(X)
        first = self._out(out, self.n_species)
        self._dT_terms(T, X, first, None)
        return first

    def d2ln_act_coeff_dT2(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        X = self._x(X)
        second = self._out(out, self.n_species)
        self._dT_terms(T, X, np.zeros(self.n_species), second)
        return second

    def dln_act_coeff_ds(
        self,
        T: float,
        X: Sequence[float],
        dT_ds: float,
        dX_ds: Sequence[float],
        out: Optional[np.ndarray] = None,
    ) -> np.ndarray:
        """Derivative of ln(gamma) along a path s given dT/ds and dX/ds."""
        X = self._x(X)
        dX = self._x(dX_ds)
        result = self._out(out, self.n_species)
        for rec, XA, XB, dA, dB in self._terms(X):
            g0, g1 = self._g(rec, T)
            dXA, dXB = dX[rec.species_a], dX[rec.species_b]
            result += ((dB - XB) * dXA + (dA - XA) * dXB) * (g0 + 2.0 * g1 * XB) + (dB - XB) * 2.0 * g1 * XA * dXB
        result += self.dln_act_coeff_dT(T, X) * dT_ds
        return result

    def dln_act_coeff_dlnN_diag(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        X = self._x(X)
        diag = self._out(out, self.n_species)
        for rec, XA, XB, dA, dB in self._terms(X):
            g0, g1 = self._g(rec, T)
            diag += 2.0 * (dB - XB) * (g0 * (dA - XA) + g1 * (2.0 * (dA - XA) * XB + XA * (dB - XB)))
        diag *= X
        return diag

    def dln_act_coeff_dlnX_diag(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        """d ln(gamma_k) / d ln(X_k) along each binary line X_A + X_B = const."""
        X = self._x(X)
        diag = self._out(out, self.n_species)
        for rec in self._interactions:
            g0, g1 = self._g(rec, T)
            XA, XB = X[rec.species_a], X[rec.species_b]
            term = XA * XB * (2.0 * g1 - 2.0 * g0 - 6.0 * g1 * XB)
            diag[rec.species_a] += term
            diag[rec.species_b] += term
        return diag

    def dln_act_coeff_dlnN(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        """Full matrix d ln(gamma_k) / d ln(N_m), row k, column m."""
        X = self._x(X)
        n = self.n_species
        jac = self._out(out, (n, n))
        for rec, XA, XB, dA, dB in self._terms(X):
            g0, g1 = self._g(rec, T)
            eA = dA - XA
            eB = dB - XB
            jac += g0 * (np.outer(eB, eA) + np.outer(eA, eB))
            jac += 2.0 * g1 * (XB * np.outer(eB, eA) + XB * np.outer(eA, eB) + XA * np.outer(eB, eB))
        jac *= X[np.newaxis, :]
        return jac

    def excess_partial_molar_volumes(self, T: float, X: Sequence[float], out: Optional[np.ndarray] = None) -> np.ndarray:
        """Excess contribution to the partial molar volumes [m^3/kmol]."""
        X = self._x(X)
        vbar = self._out(out, self.n_species)
        for rec, XA, XB, dA, dB in self._terms(X):
            g0 = rec.vh_excess[0] - T * rec.vs_excess[0]
            g1 = rec.vh_excess[1] - T * rec.vs_excess[1]
            vbar += self._structure(XA, XB, dA, dB, g0, g1)
        return vbar

    def excess_gibbs_RT(self, T: float, X: Sequence[float]) -> float:
        """Molar G^E / RT."""
        X = self._x(X)
        total = 0.0
        for rec in self._interactions:
            g0, g1 = self._g(rec, T)
            XA, XB = X[rec.species_a], X[rec.species_b]
            total += XA * XB * (g0 + g1 * XB)
        return total

    def excess_volume(self, T: float, X: Sequence[float]) -> float:
        """Molar V^E [m^3/kmol]."""
        X = self._x(X)
        total = 0.0
        for rec in self._interactions:
            g0 = rec.vh_excess[0] - T * rec.vs_excess[0]
            g1 = rec.vh_excess[1] - T * rec.vs_excess[1]
            XA, XB = X[rec.species_a], X[rec.species_b]
            total += XA * XB * (g0 + g1 * XB)
        return total
