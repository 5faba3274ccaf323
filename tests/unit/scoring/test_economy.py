"""Unit tests for EconomyCalculator pricing, odds and labels."""

import math

import pytest

from ssm.catalog import ChallengeType
from ssm.errors import InvalidInputError
from ssm.models import DifficultyBand, LootRange, SuccessChance
from ssm.scoring.economy import EconomyCalculator
from ssm.scoring.scorer import SecurityScorer


BALANCES = [0, 1, 5, 19, 20, 21, 100, 1000, 12_345, 10 ** 6, 10 ** 9]
STRENGTHS = [0.0, 10.0, 33.0, 50.0, 66.0, 99.0, 100.0]


@pytest.fixture
def calc():
    return EconomyCalculator()


class TestAttackFee:
    def test_fee_below_balance(self, calc):
        for balance in BALANCES:
            for strength in STRENGTHS:
                fee = calc.attack_fee(balance, strength)
                assert fee >= 0
                if balance > 0:
                    assert fee < balance
                else:
                    assert fee == 0

    def test_fee_non_decreasing_in_balance(self, calc):
        for strength in STRENGTHS:
            fees = [calc.attack_fee(b, strength) for b in BALANCES]
            assert fees == sorted(fees)

    def test_fee_non_decreasing_in_strength(self, calc):
        for balance in BALANCES:
            fees = [calc.attack_fee(balance, s) for s in STRENGTHS]
            assert fees == sorted(fees)

    def test_known_values(self, calc):
        # sqrt(10000) * (0.8 + 1.6 * 0.5)
        assert calc.attack_fee(10_000, 50.0) == 160
        assert calc.attack_fee(10_000, 0.0) == 80
        # clamped to fee_min, then capped at half the balance
        assert calc.attack_fee(30, 0.0) == 10
        assert calc.attack_fee(12, 0.0) == 6
        # clamped to fee_max
        assert calc.attack_fee(10 ** 9, 100.0) == 5000

    def test_fee_is_integer(self, calc):
        assert isinstance(calc.attack_fee(777, 42.0), int)

    @pytest.mark.parametrize("balance,strength", [(-1, 10.0), (100, -0.5), (math.nan, 10.0)])
    def test_negative_inputs_rejected(self, calc, balance, strength):
        with pytest.raises(InvalidInputError):
            calc.attack_fee(balance, strength)


class TestSuccessProbability:
    def test_strictly_inside_unit_interval(self, calc):
        for rating in (0, 500, 1000, 5000, 10 ** 6, 10 ** 9):
            for strength in STRENGTHS + [10 ** 6]:
                p = calc.success_probability(rating, strength)
                assert 0.0 < p < 1.0

    def test_decreasing_in_strength(self, calc):
        probs = [calc.success_probability(1000, s) for s in range(0, 101, 5)]
        assert all(a > b for a, b in zip(probs, probs[1:]))

    def test_increasing_in_rating(self, calc):
        probs = [calc.success_probability(r, 50.0) for r in (0, 1000, 2000, 4000, 5000, 6000, 8000)]
        assert all(a < b for a, b in zip(probs, probs[1:]))

    def test_even_matchup_is_coin_flip(self, calc):
        # rating / 100 == strength
        assert calc.success_probability(5000, 50.0) == pytest.approx(0.5)

    def test_asymptotes(self, calc):
        assert calc.success_probability(10 ** 9, 0.0) == pytest.approx(0.99)
        assert calc.success_probability(0, 10 ** 9) == pytest.approx(0.01)

    def test_negative_rating_rejected(self, calc):
        with pytest.raises(InvalidInputError):
            calc.success_probability(-1, 10.0)


class TestLoot:
    def test_fraction_and_cap(self, calc):
        assert calc.potential_loot(1000) == 250
        assert calc.potential_loot(100_000) == 10_000
        assert calc.potential_loot(0) == 0


class TestLabels:
    @pytest.mark.parametrize("strength,band", [
        (0.0, DifficultyBand.SOFT),
        (33.0, DifficultyBand.SOFT),
        (33.0001, DifficultyBand.TRICKY),
        (66.0, DifficultyBand.TRICKY),
        (66.5, DifficultyBand.BRUTAL),
        (100.0, DifficultyBand.BRUTAL),
        (1000.0, DifficultyBand.BRUTAL),
    ])
    def test_band(self, calc, strength, band):
        assert calc.band(strength) is band

    @pytest.mark.parametrize("balance,label", [
        (0, LootRange.SMALL),
        (500, LootRange.SMALL),
        (501, LootRange.MODERATE),
        (2000, LootRange.MODERATE),
        (2000.5, LootRange.RICH),
    ])
    def test_loot_range(self, calc, balance, label):
        assert calc.loot_range(balance) is label

    @pytest.mark.parametrize("p,label", [
        (0.0, SuccessChance.LOW),
        (0.3, SuccessChance.LOW),
        (0.31, SuccessChance.MEDIUM),
        (0.6, SuccessChance.MEDIUM),
        (0.61, SuccessChance.HIGH),
        (1.0, SuccessChance.HIGH),
    ])
    def test_success_label(self, calc, p, label):
        assert calc.success_label(p) is label

    def test_labels_are_idempotent(self, calc):
        assert calc.band(42.0) is calc.band(42.0)
        assert calc.success_label(0.45) is calc.success_label(0.45)

    @pytest.mark.parametrize("p", [-0.1, 1.5, math.nan])
    def test_success_label_rejects_non_probability(self, calc, p):
        with pytest.raises(InvalidInputError):
            calc.success_label(p)


class TestVaultPricing:
    def _loadout(self, scorer):
        return scorer.build_loadout([
            scorer.make_module(ChallengeType.PATTERN, 0.6, module_id="a"),
            scorer.make_module(ChallengeType.KEYPAD, 0.4, module_id="b"),
            scorer.make_module(ChallengeType.TIMING, 0.8, module_id="c"),
        ])

    def test_price_vault_fields_follow_sources(self):
        scorer = SecurityScorer()
        calc = EconomyCalculator(scorer)
        loadout = self._loadout(scorer)
        vault = calc.price_vault("v1", "NightOwl", 1500, loadout, attacker_rating=1000)
        strength = scorer.score(loadout.modules)
        assert vault.security_score == strength
        assert vault.loadout.effective_score == strength
        assert vault.attack_fee == calc.attack_fee(1500, strength)
        assert vault.potential_loot == calc.potential_loot(1500)
        assert vault.difficulty_band is calc.band(strength)
        assert vault.loot_range is LootRange.MODERATE
        assert vault.success_chance is calc.success_label(calc.success_probability(1000, strength))
        assert vault.last_attacked_at is None
        assert vault.attack_cooldown_until is None

    def test_price_vault_refreshes_stale_score(self):
        from dataclasses import replace
        scorer = SecurityScorer()
        calc = EconomyCalculator(scorer)
        stale = replace(self._loadout(scorer), effective_score=99.0)
        vault = calc.price_vault("v1", "NightOwl", 1500, stale, attacker_rating=1000)
        assert vault.loadout.effective_score == scorer.score(stale.modules)

    def test_economy_stats(self):
        scorer = SecurityScorer()
        calc = EconomyCalculator(scorer)
        loadout = self._loadout(scorer)
        stats = calc.economy_stats(2000, loadout)
        strength = scorer.score(loadout.modules)
        assert stats.security_score == strength
        assert stats.attack_fee == calc.attack_fee(2000, strength)
        assert stats.success_probability == calc.success_probability(1000, strength)
        assert stats.estimated_attacks_per_day == round(5.0 / (1.0 + strength / 50.0), 1)
        assert stats.recommended_insurance == (
            stats.estimated_breach_risk_per_day > stats.estimated_fail_income_per_day
        )

    def test_stronger_defence_attracts_fewer_attacks(self):
        scorer = SecurityScorer()
        calc = EconomyCalculator(scorer)
        weak = scorer.build_loadout([scorer.make_module(ChallengeType.PATTERN, 0.1, module_id="a")])
        strong = self._loadout(scorer)
        assert (calc.economy_stats(2000, strong).estimated_attacks_per_day
                < calc.economy_stats(2000, weak).estimated_attacks_per_day)
