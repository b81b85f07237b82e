"""Physical constants shared by the property models.

Values are SI on a kmol basis, the convention of the coefficient tables
these models consume. Pass a different :class:`PhysicalConstants` to the
registry, standard-state manager or excess model to work in another unit
system.
"""

from __future__ import annotations

from dataclasses import dataclass

GAS_CONSTANT = 8314.462618  # J/kmol/K
FARADAY = 96485332.12  # C/kmol
ONE_ATM = 101325.0  # Pa
T_REF = 298.15  # K
SMALL_NUMBER = 1.0e-300


@dataclass(frozen=True)
class PhysicalConstants:
    gas_constant: float = GAS_CONSTANT
    faraday: float = FARADAY
    one_atm: float = ONE_ATM

    @classmethod
    def per_mole(cls) -> "PhysicalConstants":
        """J/mol based constants."""
        return cls(gas_constant=GAS_CONSTANT * 1.0e-3, faraday=FARADAY * 1.0e-3)


DEFAULT_CONSTANTS = PhysicalConstants()
