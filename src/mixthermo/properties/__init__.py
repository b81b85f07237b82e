"""Convenience exports for the property evaluators."""

from .impl.delegated import DelegatedThermo, SpeciesState
from .impl.margules import MargulesExcessModel
from .impl.mu0_poly import Mu0Poly
from .impl.nasa7 import NASA7Species
from .impl.records import BinaryInteraction, CorrelationRecord
from .impl.registry import build
from .impl.species_thermo import SpeciesThermo
from .impl.standard_state import ConstVolumeStandardState, standard_volume_from_params
from .interfaces import (
    MixedSolventMixture,
    build_mixed_solvent_mixture,
    load_mixed_solvent_mixture,
)

__all__ = [
    "BinaryInteraction",
    "ConstVolumeStandardState",
    "CorrelationRecord",
    "DelegatedThermo",
    "MargulesExcessModel",
    "MixedSolventMixture",
    "Mu0Poly",
    "NASA7Species",
    "SpeciesState",
    "SpeciesThermo",
    "build",
    "build_mixed_solvent_mixture",
    "load_mixed_solvent_mixture",
    "standard_volume_from_params",
]
