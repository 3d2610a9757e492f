"""Progression Policy — reward schemes and level thresholds as swappable strategies.

Invariants:
    - Every threshold is > 0 for every level >= 1 (guarantees the level-up loop terminates)
    - Every reward is >= 0 (xp never goes negative)
    - Unknown or empty action text maps to the default tier, never an error
    - Label matching strips surrounding whitespace; it is otherwise exact

Design Decisions:
    - Reward scheme and threshold rule are independent strategies composed into a
      ProgressionPolicy, so "tiered rewards + flat threshold" is constructible
    - Two named presets (tiered, flat) selected by configuration via build_policy
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from dataclasses import dataclass, field
from typing import Mapping, Protocol

from fleetpet.core.domain_types import CareTier, ProgressionScheme
from fleetpet.core.errors import InvalidPolicyError


DEFAULT_TIER_XP: dict[CareTier, int] = {
    CareTier.DAILY: 10,
    CareTier.WEEKLY: 30,
    CareTier.WEEKLY_PLUS: 50,
    CareTier.SPECIAL: 100,
    CareTier.OTHER: 5,
}

# Labels as typed into the maintenance log sheet
DEFAULT_CARE_ACTION_TIERS: dict[str, str] = {
    "給油": CareTier.DAILY.value,            # refuel
    "洗車": CareTier.DAILY.value,            # wash
    "空気圧チェック": CareTier.DAILY.value,   # tyre pressure check
    "ランプチェック": CareTier.DAILY.value,   # lamp check
    "日常点検": CareTier.WEEKLY.value,        # daily inspection
    "作動油チェック": CareTier.WEEKLY.value,  # hydraulic fluid check
    "グリスアップ": CareTier.WEEKLY.value,    # greasing
    "フィルター交換": CareTier.WEEKLY.value,  # filter change
    "オイル交換": CareTier.WEEKLY_PLUS.value,     # oil change
    "バッテリー交換": CareTier.WEEKLY_PLUS.value, # battery change
    "修理": CareTier.SPECIAL.value,          # repair
    "部品交換": CareTier.SPECIAL.value,      # part replacement
    "車検": CareTier.SPECIAL.value,          # vehicle inspection
    "オーバーホール": CareTier.SPECIAL.value, # overhaul
}


class RewardScheme(Protocol):
    """XP granted for one logged action."""
    def xp_for(self, action_kind: str | None) -> int: ...


class ThresholdRule(Protocol):
    """XP needed to leave a given level."""
    def threshold(self, level: int) -> int: ...


# ─── Reward Schemes ──────────────────────────────────────────────

@dataclass(frozen=True)
class FlatReward:
    """Same XP for every action, whatever its label."""
    xp_per_action: int = 25

    def __post_init__(self):
        if self.xp_per_action < 0:
            raise InvalidPolicyError(
                f"xp_per_action must be >= 0, got {self.xp_per_action}",
            )

    def xp_for(self, action_kind: str | None) -> int:
        return self.xp_per_action


@dataclass(frozen=True)
class TieredReward:
    """Label → tier → XP lookup with a default tier for unmapped labels."""
    label_tiers: Mapping[str, CareTier] = field(
        default_factory=lambda: {
            label: CareTier(tier) for label, tier in DEFAULT_CARE_ACTION_TIERS.items()
        },
    )
    tier_xp: Mapping[CareTier, int] = field(
        default_factory=lambda: dict(DEFAULT_TIER_XP),
    )
    default_tier: CareTier = CareTier.OTHER

    def __post_init__(self):
        missing = {self.default_tier, *self.label_tiers.values()} - set(self.tier_xp)
        if missing:
            raise InvalidPolicyError(
                f"No XP configured for tier(s): {sorted(t.value for t in missing)}",
            )
        negative = [t.value for t, xp in self.tier_xp.items() if xp < 0]
        if negative:
            raise InvalidPolicyError(f"Tier XP must be >= 0: {sorted(negative)}")

    def tier_for(self, action_kind: str | None) -> CareTier:
        if not action_kind:
            return self.default_tier
        return self.label_tiers.get(action_kind.strip(), self.default_tier)

    def xp_for(self, action_kind: str | None) -> int:
        return self.tier_xp[self.tier_for(action_kind)]


# ─── Threshold Rules ─────────────────────────────────────────────

@dataclass(frozen=True)
class FlatThreshold:
    """Every level needs the same amount of XP."""
    xp: int = 100

    def __post_init__(self):
        if self.xp <= 0:
            raise InvalidPolicyError(f"Flat threshold must be > 0, got {self.xp}")

    def threshold(self, level: int) -> int:
        return self.xp


@dataclass(frozen=True)
class ScalingThreshold:
    """threshold(level) = base + level * step."""
    base: int = 100
    step: int = 10

    def __post_init__(self):
        # step >= 0 keeps the threshold non-decreasing, so level 1 is the minimum
        if self.step < 0 or self.base + self.step <= 0:
            raise InvalidPolicyError(
                f"Scaling threshold must stay > 0 (base={self.base}, step={self.step})",
            )

    def threshold(self, level: int) -> int:
        return self.base + level * self.step


# ─── Policy ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProgressionPolicy:
    """A reward scheme paired with a threshold rule."""
    rewards: RewardScheme
    thresholds: ThresholdRule

    def xp_for(self, action_kind: str | None) -> int:
        return self.rewards.xp_for(action_kind)

    def threshold(self, level: int) -> int:
        return self.thresholds.threshold(level)


def tiered_policy() -> ProgressionPolicy:
    """Tier table rewards, threshold 100 + level * 10."""
    return ProgressionPolicy(TieredReward(), ScalingThreshold())


def flat_policy() -> ProgressionPolicy:
    """25 XP per action, threshold 100 at every level."""
    return ProgressionPolicy(FlatReward(), FlatThreshold())


def _parse_tier(name: str) -> CareTier:
    try:
        return CareTier(name)
    except ValueError:
        raise InvalidPolicyError(f"Unknown care tier '{name}'") from None


def build_policy(
    scheme: ProgressionScheme,
    *,
    flat_xp_per_action: int = 25,
    flat_xp_threshold: int = 100,
    scaling_base: int = 100,
    scaling_step: int = 10,
    tier_xp: Mapping[str, int] | None = None,
    care_action_tiers: Mapping[str, str] | None = None,
) -> ProgressionPolicy:
    """Build the configured preset. Tier names arrive as strings from settings."""
    if scheme == ProgressionScheme.FLAT:
        return ProgressionPolicy(
            FlatReward(flat_xp_per_action), FlatThreshold(flat_xp_threshold),
        )

    xp_table = (
        {_parse_tier(k): v for k, v in tier_xp.items()}
        if tier_xp is not None else dict(DEFAULT_TIER_XP)
    )
    labels = care_action_tiers if care_action_tiers is not None else DEFAULT_CARE_ACTION_TIERS
    return ProgressionPolicy(
        TieredReward(
            label_tiers={label.strip(): _parse_tier(t) for label, t in labels.items()},
            tier_xp=xp_table,
        ),
        ScalingThreshold(scaling_base, scaling_step),
    )
