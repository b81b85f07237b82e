"""Unit checks and conversions to the J/kmol, m^3/kmol basis."""

from typing import Dict

from mixthermo.common.exceptions import ConfigurationError

_ENERGY_TO_J_PER_KMOL: Dict[str, float] = {
    "J/kmol": 1.0,
    "J/mol": 1.0e3,
    "kJ/mol": 1.0e6,
    "cal/mol": 4184.0,
    "kcal/mol": 4.184e6,
}

_VOLUME_TO_M3_PER_KMOL: Dict[str, float] = {
    "m3/kmol": 1.0,
    "m3/mol": 1.0e3,
    "cm3/mol": 1.0e-3,
    "L/mol": 1.0,
}


def energy_factor(unit: str, what: str = "energy") -> float:
    try:
        return _ENERGY_TO_J_PER_KMOL[unit]
    except KeyError:
        raise ConfigurationError(f"Unknown {what} unit '{unit}'") from None


def volume_factor(unit: str, what: str = "molar volume") -> float:
    try:
        return _VOLUME_TO_M3_PER_KMOL[unit]
    except KeyError:
        raise ConfigurationError(f"Unknown {what} unit '{unit}'") from None
