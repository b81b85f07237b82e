"""Dispatch table for the reference-state correlation kinds."""

from typing import Any, Dict, Protocol

import numpy as np

from mixthermo.common.exceptions import ConfigurationError

from .records import CorrelationRecord


class SpeciesCorrelation(Protocol):
    """Common interface: T [K] -> cp/R, h/RT, s/R written at slot ``index``."""

    index: int
    kind: str

    def update_properties(self, T: float, cp_R: np.ndarray, h_RT: np.ndarray, s_R: np.ndarray) -> None: ...

    def min_temp(self) -> float: ...

    def max_temp(self) -> float: ...

    def ref_pressure(self) -> float: ...

    def report_parameters(self) -> CorrelationRecord: ...

    def modify_parameters(self, coeffs) -> None: ...


REGISTRY: Dict[str, Any] = {}  # kind -> class with from_record(record, **context)


def register(kind: str):
    def deco(cls):
        REGISTRY[kind] = cls
        cls.kind = kind
        return cls
    return deco


def build(record: CorrelationRecord, **context) -> SpeciesCorrelation:
    if record.kind not in REGISTRY:
        raise ConfigurationError(
            f"Correlation kind '{record.kind}' not registered (species index {record.species_index})"
        )
    return REGISTRY[record.kind].from_record(record, **context)
