import math

import numpy as np
import pytest

from binary_hgf import InvalidParameterRegion, ParameterSet, TrialPolicy, compute
from binary_hgf.filter import run_recursion, update
from binary_hgf.state import TrialState, policy_mask


DEFAULT = ParameterSet(mu2_0=0.0, sa2_0=1.0, mu3_0=1.0, sa3_0=1.0, kappa=1.0, omega=-3.0, theta=0.1)
# Large surprise with a weak level-2/3 coupling drives pi3 below zero on the first "1".
UNSTABLE = ParameterSet(mu2_0=-4.0, sa2_0=50.0, mu3_0=0.0, sa3_0=0.01, kappa=4.0, omega=-3.0, theta=20.0)


def block_inputs(n_blocks=4, block_len=10):
    blocks = []
    for b in range(n_blocks):
        pattern = [1, 1, 0, 1, 1] if b % 2 == 0 else [0, 0, 1, 0, 0]
        blocks.extend((pattern * block_len)[:block_len])
    return np.array(blocks, dtype=float)


def sigmoid(x):
    return 1.0 / (1.0 + math.exp(-x))


def test_reference_scenario():
    u = [1, 0, 1, 1]
    traj, inf_states = compute(DEFAULT, u)

    assert len(traj) == 4
    assert traj.muhat[0, 0] == pytest.approx(0.5)
    assert traj.mu[0, 0] == 1.0
    pi2 = 1.0 / traj.sa[:, 1]
    pi3 = 1.0 / traj.sa[:, 2]
    assert np.all(np.isfinite(pi2)) and np.all(pi2 > 0)
    assert np.all(np.isfinite(pi3)) and np.all(pi3 > 0)
    assert inf_states.shape == (4, 3, 2)


def test_first_trial_matches_hand_computation():
    traj, _ = compute(DEFAULT, [1, 0, 1, 1])

    vol2 = math.exp(1.0 * 1.0 - 3.0)
    pi2hat = 1.0 / (1.0 + vol2)
    pi2 = pi2hat + 0.25
    mu2 = 0.0 + 0.5 / pi2
    da2 = (1.0 / pi2 + mu2 ** 2) * pi2hat - 1.0
    pi3hat = 1.0 / (1.0 + 0.1)
    w2 = vol2 * pi2hat
    pi3 = pi3hat + 0.5 * w2 * (w2 + (2 * w2 - 1) * da2)
    mu3 = 1.0 + 0.5 * w2 * da2 / pi3

    assert traj.mu[0, 1] == pytest.approx(mu2)
    assert traj.mu[0, 2] == pytest.approx(mu3)
    assert traj.sa[0, 1] == pytest.approx(1.0 / pi2)
    assert traj.sa[0, 2] == pytest.approx(1.0 / pi3)
    assert traj.sahat[0] == pytest.approx([0.25, 1.0 / pi2hat, 1.0 / pi3hat])
    assert traj.w[0] == pytest.approx(w2)
    assert traj.da[0] == pytest.approx([0.5, da2])


def test_shapes_follow_number_of_trials():
    u = block_inputs()
    traj, inf_states = compute(DEFAULT, u)
    T = u.size
    for series in (traj.mu, traj.sa, traj.muhat, traj.sahat):
        assert series.shape == (T, 3)
    assert traj.w.shape == (T,)
    assert traj.da.shape == (T, 2)
    assert inf_states.shape == (T, 3, 2)


def test_level_one_predictions_stay_in_unit_interval():
    traj, _ = compute(DEFAULT, block_inputs())
    mu1hat = traj.muhat[:, 0]
    assert np.all((mu1hat > 0) & (mu1hat < 1))
    assert np.all(traj.sa[:, 0] > 0)
    assert np.allclose(traj.sa[:, 0], mu1hat * (1 - mu1hat))


def test_compute_is_deterministic():
    u = block_inputs()
    traj_a, inf_a = compute(DEFAULT, u, ignore=[3, 7])
    traj_b, inf_b = compute(DEFAULT, u, ignore=[3, 7])
    assert np.array_equal(inf_a, inf_b)
    for name in ("mu", "sa", "muhat", "sahat", "w", "da"):
        assert np.array_equal(getattr(traj_a, name), getattr(traj_b, name))


def test_ignored_trials_carry_state_forward():
    u = block_inputs()
    ignore = [4, 5, 12]
    states = run_recursion(DEFAULT, u, policy_mask(u.size, ignore))
    assert len(states) == u.size + 1
    for k in ignore:
        assert states[k].as_tuple() == states[k - 1].as_tuple()

    traj, _ = compute(DEFAULT, u, ignore=ignore)
    for k in ignore:
        i = k - 1
        for name in ("mu", "sa", "sahat", "w", "da"):
            assert np.array_equal(getattr(traj, name)[i], getattr(traj, name)[i - 1])


def test_boolean_mask_and_index_set_agree():
    u = block_inputs()
    mask = np.zeros(u.size, dtype=bool)
    mask[[2, 9]] = True
    _, by_mask = compute(DEFAULT, u, ignore=mask)
    _, by_index = compute(DEFAULT, u, ignore={3, 10})
    assert np.array_equal(by_mask, by_index)


def test_ignored_first_trial_has_undefined_predictions():
    traj, _ = compute(DEFAULT, [1, 0, 1], ignore=[1])
    assert traj.mu[0, 1] == DEFAULT.mu2_0
    assert traj.sa[0, 2] == pytest.approx(DEFAULT.sa3_0)
    assert np.isnan(traj.muhat[0, 0])
    assert np.isnan(traj.da[0]).all()
    assert traj.muhat[1, 0] == pytest.approx(0.5)


def test_zero_coupling_reduces_to_two_level_filter():
    params = ParameterSet(mu2_0=0.3, sa2_0=2.0, mu3_0=0.7, sa3_0=1.0, kappa=0.0, omega=-2.0, theta=0.1)
    u = block_inputs()
    traj, _ = compute(params, u)

    mu2, pi2 = params.mu2_0, 1.0 / params.sa2_0
    expected_mu2, expected_pi2 = [], []
    for u_k in u:
        mu1hat = sigmoid(mu2)
        pi2hat = 1.0 / (1.0 / pi2 + math.exp(params.omega))
        pi2 = pi2hat + mu1hat * (1 - mu1hat)
        mu2 = mu2 + (u_k - mu1hat) / pi2
        expected_mu2.append(mu2)
        expected_pi2.append(pi2)

    assert np.allclose(traj.mu[:, 1], expected_mu2)
    assert np.allclose(1.0 / traj.sa[:, 1], expected_pi2)
    assert np.allclose(traj.mu[:, 2], params.mu3_0)
    assert np.allclose(traj.w, math.exp(params.omega) / traj.sahat[:, 1])


def test_negative_pi3_aborts_on_first_violating_trial():
    with pytest.raises(InvalidParameterRegion) as info:
        compute(UNSTABLE, [1, 1, 1])
    assert info.value.trial == 1
    assert info.value.pi3 <= 0


@pytest.mark.parametrize("ignore, trial", [([1], 2), ([1, 2], 3)])
def test_negative_pi3_reports_trial_after_skips(ignore, trial):
    with pytest.raises(InvalidParameterRegion) as info:
        compute(UNSTABLE, [1, 1, 1], ignore=ignore)
    assert info.value.trial == trial


def test_non_finite_volatility_is_rejected():
    params = ParameterSet(omega=1000.0)
    with pytest.raises(InvalidParameterRegion) as info:
        compute(params, [1, 0])
    assert info.value.trial == 1
    assert math.isnan(info.value.pi3)


def test_update_from_prior():
    prior = TrialState.prior(DEFAULT)
    assert prior.mu1 == pytest.approx(0.5)
    assert math.isnan(prior.mu1hat)
    state = update(prior, 1.0, DEFAULT, 1)
    assert state.mu1 == 1.0
    assert state.da1 == pytest.approx(0.5)
    assert state.mu1hat == pytest.approx(sigmoid(DEFAULT.mu2_0))


def test_policy_mask_marks_one_based_trials():
    mask = policy_mask(5, [1, 5])
    assert mask.tolist() == [TrialPolicy.SKIP, 0, 0, 0, TrialPolicy.SKIP]
    assert not policy_mask(3).any()


def test_non_finite_posterior_is_rejected_with_positive_pi3():
    # exp(kappa * -inf + omega) = 0, so w2 = 0 and pi3 = pi3hat stays positive
    prev = TrialState(mu1=0.5, mu2=0.0, mu3=-math.inf, pi2=1.0, pi3=1.0)
    with pytest.raises(InvalidParameterRegion, match="non-finite posterior at trial 3") as info:
        update(prev, 1.0, DEFAULT, 3)
    assert info.value.trial == 3
    assert info.value.pi3 > 0


@pytest.mark.parametrize("ignore", [[0], [5], [-1, 2]])
def test_policy_mask_rejects_out_of_range_trials(ignore):
    with pytest.raises(ValueError):
        policy_mask(4, ignore)
