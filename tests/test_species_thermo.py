import copy

import numpy as np
import pytest

from mixthermo.common.constants import ONE_ATM
from mixthermo.common.exceptions import ConfigurationError
from mixthermo.properties.impl.delegated import DelegatedThermo
from mixthermo.properties.impl.nasa7 import NASA7Species
from mixthermo.properties.impl.records import CorrelationRecord
from mixthermo.properties.impl.species_thermo import SpeciesThermo

from helpers import O2_PARAMS, ConstantCpState, build_mu0, mu_curved


def build_registry(state=None):
    sp = SpeciesThermo(3)
    sp.install(build_mu0([250.0, 298.15, 600.0, 1200.0], mu=mu_curved, index=0, t_min=250.0, t_max=1200.0))
    sp.install_record(NASA7Species.record_from_params(1, O2_PARAMS, name="O2"))
    sp.install_record(
        CorrelationRecord(species_index=2, kind="delegated", t_min=0.0, t_max=0.0, ref_pressure=ONE_ATM),
        state=state or ConstantCpState(),
    )
    return sp


def test_update_fills_every_slot():
    state = ConstantCpState()
    sp = build_registry(state)
    cp, h, s = np.zeros(3), np.zeros(3), np.zeros(3)
    sp.update(700.0, cp, h, s)
    for k in range(2):
        assert (cp[k], h[k], s[k]) == sp[k].evaluate(700.0)
    assert state.T == 700.0 and state.n_set == 1
    assert h[2] == state.enthalpy_RT_ref()
    assert s[2] == state.entropy_R_ref()
    assert cp[2] == state.cp_R_ref()


def test_update_one():
    sp = build_registry()
    cp, h, s = np.full(3, -1.0), np.full(3, -1.0), np.full(3, -1.0)
    sp.update_one(1, 500.0, cp, h, s)
    assert cp[0] == -1.0 and cp[2] == -1.0
    assert cp[1] == sp[1].evaluate(500.0)[0]


def test_temperature_limits_per_species_and_overall():
    sp = build_registry()
    assert sp.min_temp(0) == 250.0
    assert sp.max_temp(1) == 3500.0
    assert sp.min_temp(2) == 250.0 and sp.max_temp(2) == 2500.0
    assert sp.min_temp() == 250.0
    assert sp.max_temp() == 1200.0
    assert sp.ref_pressure() == ONE_ATM


def test_out_of_range_temperature_is_not_an_error():
    sp = build_registry()
    cp, h, s = np.zeros(3), np.zeros(3), np.zeros(3)
    sp.update(5000.0, cp, h, s)
    assert np.all(np.isfinite(h))


def test_missing_slot_and_bad_index():
    sp = SpeciesThermo(2)
    sp.install(build_mu0([298.15, 500.0], index=0))
    assert not sp.is_complete()
    assert sp.missing() == [1]
    with pytest.raises(ConfigurationError, match="species 1"):
        sp.update(400.0, np.zeros(2), np.zeros(2), np.zeros(2))
    with pytest.raises(ConfigurationError, match="out of range"):
        sp.install(build_mu0([298.15, 500.0], index=5))


def test_unknown_kind_and_missing_state():
    sp = SpeciesThermo(1)
    with pytest.raises(ConfigurationError, match="not registered"):
        sp.install_record(CorrelationRecord(0, "shomate", 200.0, 1000.0, ONE_ATM, (1.0,)))
    with pytest.raises(ConfigurationError, match="external species state"):
        sp.install_record(CorrelationRecord(0, "delegated", 200.0, 1000.0, ONE_ATM))


def test_reference_pressure_must_agree():
    sp = SpeciesThermo(2)
    sp.install(build_mu0([298.15, 500.0], index=0))
    sp.install(DelegatedThermo(1, ConstantCpState(p_ref=1.0e5)))
    assert sp.ref_pressure(1) == 1.0e5
    with pytest.raises(ConfigurationError, match="reference pressure"):
        sp.ref_pressure()


def test_duplicate_has_value_semantics():
    state = ConstantCpState()
    sp = build_registry(state)
    dup = sp.duplicate()
    dup.modify_parameters(0, build_mu0([298.15, 900.0]).report_parameters().coeffs)
    assert dup[0].evaluate(700.0) != sp[0].evaluate(700.0)
    assert dup[2].state is state
    assert copy.copy(sp[2]).state is state
    record = dup.report_parameters(2)
    assert record.kind == "delegated"
    assert record.coeffs == ()
