"""
Enemy AI Tests

Tests action selection per behavior and action resolution:
- Aggressive, defensive, balanced and random selection
- Balanced-mode weights
- Attack, defend, buff, debuff and special actions
- Intent caching
"""

from dataclasses import replace

import pytest

from runeblade.content.enemies import (
    ALL_ENEMIES,
    DARK_KNIGHT,
    DRAGON,
    GOBLIN,
    ORC,
    SKELETON,
    ActionType,
    EnemyAction,
    EnemyBehavior,
    EnemyTemplate,
    get_enemy_template,
    get_tier,
)
from runeblade.content.enemies_ai import (
    apply_action,
    balanced_weights,
    choose_action,
    execute_action,
    update_enemy_intent,
)
from runeblade.content.statuses import StatusType, create_weakness
from runeblade.state.rng import Random


def _sample(enemy, state, seed=7, n=2000):
    rng = Random(seed)
    return [choose_action(enemy, state, rng) for _ in range(n)]


class TestTemplates:

    def test_registry(self):
        assert set(ALL_ENEMIES) == {"goblin", "orc", "skeleton", "dark-knight", "dragon"}

    def test_lookup(self):
        assert get_enemy_template("orc") is ORC
        with pytest.raises(KeyError):
            get_enemy_template("slime")
        with pytest.raises(KeyError):
            get_tier("tier9")

    def test_tiers(self):
        assert get_tier("tier1") == [GOBLIN, SKELETON]
        assert get_tier("bosses") == [DRAGON]

    def test_template_needs_actions(self):
        with pytest.raises(ValueError):
            EnemyTemplate("x", "X", 10, 0, EnemyBehavior.RANDOM, 1, ())


class TestAggressive:

    def test_without_buffs_always_attacks(self, make_enemy, make_state):
        enemy = make_enemy(GOBLIN)
        picks = _sample(enemy, make_state(enemy=enemy), n=300)
        assert all(a.action_type == ActionType.ATTACK for a in picks)

    def test_with_buffs_mostly_attacks(self, make_enemy, make_state):
        enemy = make_enemy(DRAGON)
        picks = _sample(enemy, make_state(enemy=enemy))
        types = [a.action_type for a in picks]
        assert ActionType.DEFEND not in types
        assert 0.75 < types.count(ActionType.ATTACK) / len(types) < 0.85
        assert ActionType.BUFF in types


class TestDefensive:

    def _guard(self, make_enemy, hp):
        return make_enemy(ORC, hp=hp, behavior=EnemyBehavior.DEFENSIVE)

    def test_low_hp_mostly_defends(self, make_enemy, make_state):
        enemy = self._guard(make_enemy, hp=10)
        picks = _sample(enemy, make_state(enemy=enemy))
        share = sum(a.action_type == ActionType.DEFEND for a in picks) / len(picks)
        # 0.7 + 0.3 * 0.4 * 0.25
        assert 0.66 < share < 0.80

    def test_healthy_rarely_defends(self, make_enemy, make_state):
        enemy = self._guard(make_enemy, hp=45)
        picks = _sample(enemy, make_state(enemy=enemy))
        share = sum(a.action_type == ActionType.DEFEND for a in picks) / len(picks)
        # 0.4 * 0.25
        assert share < 0.16


class TestBalanced:

    def test_weights_healthy_player(self, make_enemy, make_state):
        enemy = make_enemy(ORC)
        weights = balanced_weights(enemy, make_state(enemy=enemy))
        assert [w for _, w in weights] == [10, 10, 5, 5]

    def test_weights_finisher_and_low_hp(self, make_enemy, make_player, make_state):
        enemy = make_enemy(DARK_KNIGHT, hp=20)
        state = make_state(player=make_player(hp=20), enemy=enemy)
        weighted = balanced_weights(enemy, state)
        assert [a.action_type for a, _ in weighted] == [
            ActionType.ATTACK, ActionType.ATTACK, ActionType.DEFEND, ActionType.BUFF, ActionType.DEBUFF]
        assert [w for _, w in weighted] == [20, 20, 20, 5, 3]

    def test_debuff_bonus_when_player_healthy(self, make_enemy, make_state):
        enemy = make_enemy(DARK_KNIGHT)
        weights = balanced_weights(enemy, make_state(enemy=enemy))
        assert weights[-1][1] == 8

    def test_special_only_falls_back_to_uniform(self, make_enemy, make_state):
        special = EnemyAction(ActionType.SPECIAL, 0, "Wail")
        enemy = make_enemy(ORC, actions=(special,))
        assert balanced_weights(enemy, make_state(enemy=enemy)) == []
        assert choose_action(enemy, make_state(enemy=enemy), Random(1)) == special

    def test_follows_weights(self, make_enemy, make_state):
        enemy = make_enemy(ORC)
        picks = _sample(enemy, make_state(enemy=enemy))
        attacks = sum(a.action_type == ActionType.ATTACK for a in picks) / len(picks)
        # 20 / 30
        assert 0.62 < attacks < 0.72


class TestRandom:

    def test_uniform_over_actions(self, make_enemy, make_state):
        enemy = make_enemy(SKELETON)
        picks = _sample(enemy, make_state(enemy=enemy), n=900)
        for action in SKELETON.actions:
            assert 240 < picks.count(action) < 360


class TestApplyAction:

    def test_attack(self, make_state):
        state = apply_action(make_state(), EnemyAction(ActionType.ATTACK, 5, "Hit"))
        assert state.player.hp == 75

    def test_attack_through_armor(self, make_state, make_player):
        state = apply_action(make_state(player=make_player(armor=5)), EnemyAction(ActionType.ATTACK, 8, "Hit"))
        assert state.player.armor == 0
        assert state.player.hp == 77

    def test_weakness_reduces_attack(self, make_state, make_enemy):
        state = make_state(enemy=make_enemy(status_effects=[create_weakness(2, 2)]))
        assert apply_action(state, EnemyAction(ActionType.ATTACK, 5, "Hit")).player.hp == 77

    def test_weakened_attack_still_hits(self, make_state, make_enemy):
        state = make_state(enemy=make_enemy(status_effects=[create_weakness(10, 2)]))
        assert apply_action(state, EnemyAction(ActionType.ATTACK, 5, "Hit")).player.hp == 79

    def test_defend(self, make_state):
        state = apply_action(make_state(), EnemyAction(ActionType.DEFEND, 3, "Dodge"))
        assert state.enemy.armor == 3

    def test_buff(self, make_state):
        state = apply_action(make_state(), EnemyAction(ActionType.BUFF, 3, "Fury"))
        assert state.enemy.attack_power == GOBLIN.attack_power + 3

    def test_buff_does_not_raise_attack_damage(self, make_state):
        state = apply_action(make_state(), EnemyAction(ActionType.BUFF, 3, "Fury"))
        state = apply_action(state, EnemyAction(ActionType.ATTACK, 5, "Hit"))
        assert state.player.hp == 75

    def test_debuff(self, make_state):
        state = apply_action(make_state(), EnemyAction(ActionType.DEBUFF, 2, "Chill"))
        effect, = state.player.status_effects
        assert effect.status_type == StatusType.VULNERABLE
        assert (effect.value, effect.duration) == (2, 2)

    def test_special_does_nothing(self, make_state):
        state = make_state()
        assert apply_action(state, EnemyAction(ActionType.SPECIAL, 9, "Wail")) is state

    def test_no_enemy(self, make_state):
        state = make_state(enemy=None)
        assert apply_action(state, EnemyAction(ActionType.ATTACK, 9, "Hit")) is state


class TestIntent:

    def test_update_sets_intent(self, make_state):
        state = update_enemy_intent(make_state(), Random(3))
        assert state.enemy.intent in GOBLIN.actions

    def test_update_without_enemy(self, make_state):
        state = make_state(enemy=None)
        assert update_enemy_intent(state, Random(3)) is state

    def test_same_seed_same_intent(self, make_state):
        state = make_state()
        assert update_enemy_intent(state, Random(8)) == update_enemy_intent(state, Random(8))

    def test_execute_action_goblin_attacks(self, make_state):
        state = execute_action(make_state(), Random(4))
        assert state.player.hp in (75, 72)

    def test_execute_action_no_enemy(self, make_state):
        state = make_state(enemy=None)
        assert execute_action(state, Random(4)) is state

    def test_intent_survives_replace(self, make_state):
        intent = GOBLIN.actions[2]
        state = make_state()
        state = replace(state, enemy=replace(state.enemy, intent=intent))
        assert state.enemy.intent.description == "Dodge"
