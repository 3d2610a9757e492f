"""Progression Policy — tests for reward schemes, thresholds and build_policy.

Tests cover:
    - Default tier table maps every known label to the right XP
    - Whitespace around labels is ignored, anything else falls to the default tier
    - Threshold formulas (flat, 100 + level * 10)
    - Invalid configuration raises InvalidPolicyError at construction
    - build_policy selects presets from scheme names
"""

import pytest

from fleetpet.core.domain_types import CareTier, ProgressionScheme
from fleetpet.core.errors import InvalidPolicyError
from fleetpet.core.progression_policy import (
    DEFAULT_CARE_ACTION_TIERS, FlatReward, FlatThreshold, ScalingThreshold,
    TieredReward, build_policy, flat_policy, tiered_policy,
)


@pytest.mark.parametrize("label,xp", [
    ("給油", 10), ("洗車", 10), ("空気圧チェック", 10), ("ランプチェック", 10),
    ("日常点検", 30), ("作動油チェック", 30), ("グリスアップ", 30), ("フィルター交換", 30),
    ("オイル交換", 50), ("バッテリー交換", 50),
    ("修理", 100), ("部品交換", 100), ("車検", 100), ("オーバーホール", 100),
])
def test_default_tier_table(label, xp):
    assert TieredReward().xp_for(label) == xp


def test_default_table_covers_fourteen_labels():
    assert len(DEFAULT_CARE_ACTION_TIERS) == 14


def test_unmapped_label_uses_other_tier():
    rewards = TieredReward()
    assert rewards.tier_for("清掃") == CareTier.OTHER
    assert rewards.xp_for("清掃") == 5


def test_none_action_uses_default_tier():
    assert TieredReward().xp_for(None) == 5


def test_label_whitespace_is_stripped():
    assert TieredReward().xp_for("  車検\n") == 100


def test_custom_label_table():
    rewards = TieredReward(label_tiers={"refuel": CareTier.DAILY, "repair": CareTier.SPECIAL})
    assert rewards.xp_for("refuel") == 10
    assert rewards.xp_for("repair") == 100
    assert rewards.xp_for("給油") == 5


def test_flat_reward_ignores_label():
    rewards = FlatReward(25)
    assert rewards.xp_for("修理") == rewards.xp_for("anything") == 25


def test_scaling_threshold_formula():
    rule = ScalingThreshold()
    assert rule.threshold(1) == 110
    assert rule.threshold(5) == 150


def test_flat_threshold_is_constant():
    rule = FlatThreshold(100)
    assert rule.threshold(1) == rule.threshold(42) == 100


@pytest.mark.parametrize("factory", [
    lambda: FlatThreshold(0),
    lambda: ScalingThreshold(base=-10, step=10),
    lambda: ScalingThreshold(base=100, step=-1),
    lambda: FlatReward(-1),
    lambda: TieredReward(tier_xp={CareTier.OTHER: -5}, label_tiers={}),
    lambda: TieredReward(tier_xp={CareTier.DAILY: 10}),
])
def test_invalid_configuration_is_rejected(factory):
    with pytest.raises(InvalidPolicyError):
        factory()


def test_presets():
    assert tiered_policy().threshold(1) == 110
    assert tiered_policy().xp_for("オイル交換") == 50
    assert flat_policy().threshold(3) == 100
    assert flat_policy().xp_for("オイル交換") == 25


def test_build_policy_flat():
    policy = build_policy(ProgressionScheme.FLAT, flat_xp_per_action=20, flat_xp_threshold=80)
    assert policy.xp_for("修理") == 20
    assert policy.threshold(7) == 80


def test_build_policy_accepts_scheme_string():
    assert build_policy("flat").threshold(1) == 100


def test_build_policy_tiered_with_string_config():
    policy = build_policy(
        ProgressionScheme.TIERED,
        scaling_base=50, scaling_step=5,
        tier_xp={"daily": 1, "weekly": 2, "weekly_plus": 3, "special": 4, "other": 0},
        care_action_tiers={" wash ": "daily", "rebuild": "special"},
    )
    assert policy.threshold(2) == 60
    assert policy.xp_for("wash") == 1
    assert policy.xp_for("rebuild") == 4
    assert policy.xp_for("other") == 0


def test_build_policy_rejects_unknown_tier_name():
    with pytest.raises(InvalidPolicyError):
        build_policy(ProgressionScheme.TIERED, care_action_tiers={"wash": "hourly"})
