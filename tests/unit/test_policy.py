import pytest

from idiom_bench.harness.errors import ConfigurationFault
from idiom_bench.harness.policy import MutationAction, MutationPolicy


def test_policy_alternates_absent_and_present():
    policy = MutationPolicy(period=100, absent_every=2)
    assert policy.should_mutate(0) is MutationAction.SET_ABSENT
    assert policy.should_mutate(1) is MutationAction.NONE
    assert policy.should_mutate(99) is MutationAction.NONE
    assert policy.should_mutate(100) is MutationAction.SET_PRESENT
    assert policy.should_mutate(200) is MutationAction.SET_ABSENT
    assert policy.should_mutate(300) is MutationAction.SET_PRESENT


def test_policy_is_pure():
    policy = MutationPolicy(period=7, absent_every=3)
    first = [policy.should_mutate(i) for i in range(200)]
    second = [policy.should_mutate(i) for i in range(200)]
    assert first == second


def test_absent_every_one_always_sets_absent():
    policy = MutationPolicy(period=10, absent_every=1)
    actions = {policy.should_mutate(i) for i in range(0, 100, 10)}
    assert actions == {MutationAction.SET_ABSENT}


def test_mutations_for_matches_enumeration():
    policy = MutationPolicy(period=100, absent_every=2)
    for iterations in (1, 99, 100, 101, 1_000, 10_000, 12_345):
        actions = [policy.should_mutate(i) for i in range(iterations)]
        expected = (actions.count(MutationAction.SET_PRESENT), actions.count(MutationAction.SET_ABSENT))
        assert policy.mutations_for(iterations) == expected


def test_mutations_for_zero_iterations():
    assert MutationPolicy().mutations_for(0) == (0, 0)


@pytest.mark.parametrize("period, absent_every", [(0, 2), (-1, 2), (100, 0)])
def test_policy_rejects_non_positive_parameters(period, absent_every):
    with pytest.raises(ConfigurationFault):
        MutationPolicy(period=period, absent_every=absent_every)
