"""Shared builders for the property tests."""

from math import log

from mixthermo.common.constants import ONE_ATM, T_REF
from mixthermo.properties.impl.mu0_poly import Mu0Poly

H298 = -4.0e8  # J/kmol
S298 = 8.0e4  # J/kmol/K
CP = 7.5e4  # J/kmol/K


def mu_const_cp(T: float) -> float:
    """mu0 [J/kmol] of a species with constant cp."""
    return H298 + CP * (T - T_REF) - T * (S298 + CP * log(T / T_REF))


def mu_curved(T: float) -> float:
    """mu0 table whose interval heat capacities all differ."""
    return mu_const_cp(T) + 50.0 * (T - T_REF) ** 2


def build_mu0(temps, mu=mu_const_cp, index=0, t_min=100.0, t_max=3000.0, **kwargs) -> Mu0Poly:
    return Mu0Poly.from_points(index, [(T, mu(T)) for T in temps], H298, t_min, t_max, ONE_ATM, **kwargs)


class ConstantCpState:
    """External species state that counts how often its temperature is set."""

    def __init__(self, h298_R=-5.0e4, s298_R=10.0, cp_R=9.0, t_min=250.0, t_max=2500.0, p_ref=ONE_ATM):
        self.h298_R = h298_R
        self.s298_R = s298_R
        self.cp_R = cp_R
        self._t_min = t_min
        self._t_max = t_max
        self._p_ref = p_ref
        self.T = T_REF
        self.n_set = 0

    def set_temperature(self, T):
        self.T = T
        self.n_set += 1

    def enthalpy_RT_ref(self):
        return (self.h298_R + self.cp_R * (self.T - T_REF)) / self.T

    def entropy_R_ref(self):
        return self.s298_R + self.cp_R * log(self.T / T_REF)

    def cp_R_ref(self):
        return self.cp_R

    def min_temp(self):
        return self._t_min

    def max_temp(self):
        return self._t_max

    def ref_pressure(self):
        return self._p_ref


# GRI-Mech 3.0 O2
O2_PARAMS = {
    "T_ranges": [200.0, 1000.0, 3500.0],
    "low": [3.78245636e+00, -2.99673416e-03, 9.84730201e-06, -9.68129509e-09, 3.24372837e-12,
            -1.06394356e+03, 3.65767573e+00],
    "high": [3.28253784e+00, 1.48308754e-03, -7.57966669e-07, 2.09470555e-10, -2.16717794e-14,
             -1.08845772e+03, 5.45323129e+00],
}
