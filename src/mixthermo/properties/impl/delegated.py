"""Reference-state correlation that reads its values from an external species state."""

from __future__ import annotations

from typing import Any, Dict, Protocol

from mixthermo.common.constants import ONE_ATM
from mixthermo.common.exceptions import ConfigurationError

from .records import CorrelationRecord
from .registry import register


class SpeciesState(Protocol):
    """Pressure-dependent single-species state owned elsewhere."""

    def set_temperature(self, T: float) -> None: ...

    def enthalpy_RT_ref(self) -> float: ...

    def entropy_R_ref(self) -> float: ...

    def cp_R_ref(self) -> float: ...

    def min_temp(self) -> float: ...

    def max_temp(self) -> float: ...

    def ref_pressure(self) -> float: ...


@register("delegated")
class DelegatedThermo:
    """Wraps a :class:`SpeciesState` without owning it.

    Copies (including deep copies of a registry) share the same state object.
    """

    def __init__(self, index: int, state: SpeciesState, name: str = ""):
        if state is None:
            raise ConfigurationError(
                f"Delegated thermo for {name or f'species {index}'} needs an external species state"
            )
        self.index = index
        self.state = state
        self.name = name

    @classmethod
    def from_record(cls, record: CorrelationRecord, state: SpeciesState = None, **_) -> "DelegatedThermo":
        return cls(record.species_index, state, name=record.name)

    @staticmethod
    def record_from_params(index: int, sp: Dict[str, Any], p_ref: float = ONE_ATM, name: str = "") -> CorrelationRecord:
        return CorrelationRecord(
            species_index=index,
            kind="delegated",
            t_min=float(sp.get("t_min", 0.0)),
            t_max=float(sp.get("t_max", float("inf"))),
            ref_pressure=float(sp.get("p_ref", p_ref)),
            name=name,
        )

    def __copy__(self) -> "DelegatedThermo":
        return DelegatedThermo(self.index, self.state, self.name)

    def __deepcopy__(self, memo) -> "DelegatedThermo":
        return self.__copy__()

    def update_properties(self, T: float, cp_R, h_RT, s_R) -> None:
        self.state.set_temperature(T)
        k = self.index
        h_RT[k] = self.state.enthalpy_RT_ref()
        cp_R[k] = self.state.cp_R_ref()
        s_R[k] = self.state.entropy_R_ref()

    def min_temp(self) -> float:
        return self.state.min_temp()

    def max_temp(self) -> float:
        return self.state.max_temp()

    def ref_pressure(self) -> float:
        return self.state.ref_pressure()

    def report_parameters(self) -> CorrelationRecord:
        return CorrelationRecord(
            species_index=self.index,
            kind=self.kind,
            t_min=self.min_temp(),
            t_max=self.max_temp(),
            ref_pressure=self.ref_pressure(),
            name=self.name,
        )

    def modify_parameters(self, coeffs) -> None:
        """Coefficients live in the external state; nothing to modify here."""
