import numpy as np
import pytest

from mixthermo.common.constants import GAS_CONSTANT, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError
from mixthermo.properties.impl.margules import MargulesExcessModel
from mixthermo.properties.impl.records import BinaryInteraction

R = GAS_CONSTANT

# KCl(L) / LiCl(L)
KCL_LICL = BinaryInteraction(
    species_a=0,
    species_b=1,
    h_excess=(-17570e3, -377e3),
    s_excess=(-7.627e3, 4.958e3),
    vh_excess=(-4.0e-3, 0.0),
    vs_excess=(0.0, 0.0),
    label="KCl(L)::LiCl(L)",
)


def random_model(n_species, pairs, seed=7):
    rng = np.random.default_rng(seed)
    interactions = [
        BinaryInteraction(
            species_a=a,
            species_b=b,
            h_excess=tuple(rng.uniform(-2.0e7, 2.0e7, 2)),
            s_excess=tuple(rng.uniform(-1.0e4, 1.0e4, 2)),
            vh_excess=tuple(rng.uniform(-5.0e-3, 5.0e-3, 2)),
            vs_excess=tuple(rng.uniform(-1.0e-6, 1.0e-6, 2)),
        )
        for a, b in pairs
    ]
    return MargulesExcessModel(n_species, interactions), rng


def ternary_model():
    model, rng = random_model(3, ((0, 1), (2, 1)))
    return model, rng.dirichlet(np.ones(3))


def g_terms(rec, T):
    RT = R * T
    return (rec.h_excess[0] - T * rec.s_excess[0]) / RT, (rec.h_excess[1] - T * rec.s_excess[1]) / RT


def test_binary_matches_two_parameter_margules():
    model = MargulesExcessModel(2, [KCL_LICL])
    T = 900.0
    g0, g1 = g_terms(KCL_LICL, T)
    for XA in (0.1, 0.4, 0.5, 0.85):
        XB = 1.0 - XA
        ln_gamma = model.ln_activity_coefficients(T, [XA, XB])
        assert ln_gamma[0] == pytest.approx(XB ** 2 * (g0 + g1 * (XB - XA)), rel=1e-12)
        assert ln_gamma[1] == pytest.approx(XA ** 2 * (g0 + 2.0 * g1 * XB), rel=1e-12)
    half = model.ln_activity_coefficients(T, [0.5, 0.5])
    assert half[0] == pytest.approx(0.25 * g0, rel=1e-12)
    assert half[1] == pytest.approx(0.25 * (g0 + g1), rel=1e-12)


def test_kcl_licl_reference_values():
    model = MargulesExcessModel(2, [KCL_LICL])
    ln_gamma = model.ln_activity_coefficients(900.0, [0.4, 0.6])
    assert abs(ln_gamma[0] - (-0.561601659005)) < 1e-9
    assert abs(ln_gamma[1] - (-0.353071311652)) < 1e-9
    np.testing.assert_allclose(model.activity_coefficients(900.0, [0.4, 0.6]), np.exp(ln_gamma), rtol=1e-14)


def test_mole_weighted_sums_give_molar_excess_properties():
    model, X = ternary_model()
    T = 750.0
    ln_gamma = model.ln_activity_coefficients(T, X)
    assert np.dot(X, ln_gamma) == pytest.approx(model.excess_gibbs_RT(T, X), rel=1e-12, abs=1e-14)
    v_ex = model.excess_partial_molar_volumes(T, X)
    assert np.dot(X, v_ex) == pytest.approx(model.excess_volume(T, X), rel=1e-12, abs=1e-18)


def test_temperature_derivatives():
    model, X = ternary_model()
    T, dT = 800.0, 1.0e-2
    d1 = model.dln_act_coeff_dT(T, X)
    fd1 = (model.ln_activity_coefficients(T + dT, X) - model.ln_activity_coefficients(T - dT, X)) / (2.0 * dT)
    np.testing.assert_allclose(d1, fd1, rtol=1e-6, atol=1e-10)
    d2 = model.d2ln_act_coeff_dT2(T, X)
    fd2 = (model.dln_act_coeff_dT(T + dT, X) - model.dln_act_coeff_dT(T - dT, X)) / (2.0 * dT)
    np.testing.assert_allclose(d2, fd2, rtol=1e-6, atol=1e-12)
    np.testing.assert_allclose(d2, -2.0 / T * d1, rtol=1e-12)


def test_path_derivative():
    model, X = ternary_model()
    T = 800.0
    dT_ds = 3.0
    dX_ds = np.array([0.2, -0.5, 0.3])
    eps = 1.0e-6
    plus = model.ln_activity_coefficients(T + eps * dT_ds, X + eps * dX_ds)
    minus = model.ln_activity_coefficients(T - eps * dT_ds, X - eps * dX_ds)
    np.testing.assert_allclose(
        model.dln_act_coeff_ds(T, X, dT_ds, dX_ds), (plus - minus) / (2.0 * eps), rtol=1e-6, atol=1e-8
    )
    # temperature part is counted once however many records there are
    only_T = model.dln_act_coeff_ds(T, X, dT_ds, np.zeros(3))
    np.testing.assert_allclose(only_T, dT_ds * model.dln_act_coeff_dT(T, X), rtol=1e-14)


@pytest.mark.parametrize(
    "n_species, pairs",
    [
        (3, ((0, 1), (2, 1))),
        (4, ((0, 1), (1, 2), (3, 0))),
    ],
)
def test_mole_number_jacobian(n_species, pairs):
    model, rng = random_model(n_species, pairs, seed=11)
    T = 700.0
    eps = 1.0e-6
    for _ in range(5):
        X = rng.dirichlet(np.ones(n_species))
        jac = model.dln_act_coeff_dlnN(T, X)
        np.testing.assert_allclose(jac.sum(axis=1), 0.0, atol=1e-12)
        np.testing.assert_allclose(X @ jac, 0.0, atol=1e-12)
        np.testing.assert_allclose(np.diag(jac), model.dln_act_coeff_dlnN_diag(T, X), rtol=1e-12, atol=1e-14)

        for m in range(n_species):
            step = np.zeros(n_species)
            step[m] = eps
            N_plus, N_minus = X * np.exp(step), X * np.exp(-step)
            fd = (
                model.ln_activity_coefficients(T, N_plus / N_plus.sum())
                - model.ln_activity_coefficients(T, N_minus / N_minus.sum())
            ) / (2.0 * eps)
            np.testing.assert_allclose(jac[:, m], fd, rtol=1e-6, atol=1e-8)


def test_mole_fraction_diagonal_binary():
    model = MargulesExcessModel(2, [KCL_LICL])
    T = 900.0
    diag = model.dln_act_coeff_dlnX_diag(T, [0.4, 0.6])
    eps = 1.0e-6
    for k in range(2):
        fd = []
        for sign in (1.0, -1.0):
            X = np.array([0.4, 0.6])
            X[k] *= np.exp(sign * eps)
            X[1 - k] = 1.0 - X[k]
            fd.append(model.ln_activity_coefficients(T, X)[k])
        assert diag[k] == pytest.approx((fd[0] - fd[1]) / (2.0 * eps), rel=1e-6)


def test_output_buffers_are_overwritten():
    model, X = ternary_model()
    buf = np.full(3, 99.0)
    result = model.ln_activity_coefficients(600.0, X, out=buf)
    assert result is buf
    np.testing.assert_allclose(buf, model.ln_activity_coefficients(600.0, X), rtol=1e-14)
    jac = np.full((3, 3), 5.0)
    model.dln_act_coeff_dlnN(600.0, X, out=jac)
    np.testing.assert_allclose(jac, model.dln_act_coeff_dlnN(600.0, X), rtol=1e-14)


def test_no_interactions_is_ideal():
    model = MargulesExcessModel(3)
    X = [0.2, 0.3, 0.5]
    assert np.array_equal(model.ln_activity_coefficients(500.0, X), np.zeros(3))
    assert np.array_equal(model.dln_act_coeff_dlnN(500.0, X), np.zeros((3, 3)))
    assert model.excess_gibbs_RT(500.0, X) == 0.0


def test_configuration_errors():
    model = MargulesExcessModel(2)
    with pytest.raises(ConfigurationError, match="out of range"):
        model.add_interaction(BinaryInteraction(species_a=0, species_b=2))
    with pytest.raises(ConfigurationError, match="with itself"):
        model.add_interaction(BinaryInteraction(species_a=1, species_b=1))
    with pytest.raises(ConfigurationError, match="wrong number of params found for s_excess"):
        model.add_interaction(BinaryInteraction(species_a=0, species_b=1, s_excess=(1.0, 2.0, 3.0)))
    assert model.interactions == []
    with pytest.raises(ValueError, match="shape"):
        model.ln_activity_coefficients(500.0, [0.5, 0.25, 0.25])


def test_injected_constants_set_the_energy_basis():
    per_mole = BinaryInteraction(
        species_a=0,
        species_b=1,
        h_excess=(-17570.0, -377.0),
        s_excess=(-7.627, 4.958),
    )
    model = MargulesExcessModel(2, [per_mole], constants=PhysicalConstants.per_mole())
    ln_gamma = model.ln_activity_coefficients(900.0, [0.4, 0.6])
    assert abs(ln_gamma[0] - (-0.561601659005)) < 1e-9
    assert abs(ln_gamma[1] - (-0.353071311652)) < 1e-9
