"""
Combat Engine Tests

Tests the battle state machine end to end:
- Battle start and the opening hand
- Playing cards, mana rejection and ignored plays
- Drawing and reshuffling
- The enemy turn, intent replay and the next round
- Victory and defeat detection (enemy checked first)
- The CombatEngine wrapper and greedy autoplay
"""

from dataclasses import replace

import pytest

from runeblade.combat_engine import (
    CombatEngine,
    CombatPhase,
    check_game_end,
    end_turn,
    get_phase,
    get_playable_cards,
    greedy_policy,
    play_card,
    start_battle,
)
from runeblade.content.enemies import GOBLIN, ORC, ActionType, EnemyAction
from runeblade.content.statuses import create_poison
from runeblade.state.combat import (
    GameConfig,
    LogType,
    Turn,
    discard_card,
    discard_hand,
    draw_cards,
    draw_to_hand_size,
    reset_player,
)
from runeblade.state.rng import Random


def _messages(state):
    return [entry.message for entry in state.log]


def _with_intent(state, action):
    return replace(state, enemy=replace(state.enemy, intent=action))


class TestStartBattle:

    def test_opening_state(self, rng):
        state = start_battle(rng)
        assert state.round == 1
        assert state.turn == Turn.PLAYER
        assert not state.is_over
        assert len(state.player.hand) == 5
        assert len(state.player.deck) == 5
        assert state.player.discard_pile == ()
        assert state.enemy.id in ("goblin", "skeleton")
        assert state.enemy.intent in state.enemy.actions

    def test_log_starts(self, rng):
        state = start_battle(rng)
        assert _messages(state) == ["Battle started!"]
        assert state.log[0].log_type == LogType.SYSTEM

    def test_given_enemy(self, rng):
        state = start_battle(rng, enemy=ORC)
        assert state.enemy.id == "orc"
        assert state.enemy.hp == 45
        assert state.enemy.armor == 5

    def test_tier(self, rng):
        assert start_battle(rng, tier="tier3").enemy.id == "dark-knight"

    def test_hand_size_config(self, rng):
        state = start_battle(rng, config=GameConfig(starting_hand_size=3))
        assert len(state.player.hand) == 3

    def test_deterministic(self):
        a, b = start_battle(Random(11)), start_battle(Random(11))
        assert [c.id for c in a.player.hand] == [c.id for c in b.player.hand]
        assert a.enemy == b.enemy

    def test_phase(self, rng):
        assert get_phase(start_battle(rng)) == CombatPhase.PLAYER_TURN


class TestPlayCard:

    def test_strike(self, make_state, make_player, make_card):
        strike = make_card("attack-basic")
        state = play_card(make_state(player=make_player(hand=[strike])), strike)
        assert state.enemy.hp == 19
        assert state.player.mana == 2
        assert state.player.hand == ()
        assert state.player.discard_pile == (strike,)
        assert _messages(state)[-1] == "You played Strike!"
        assert state.log[-1].log_type == LogType.ACTION

    def test_not_enough_mana_only_logs(self, make_state, make_player, make_card):
        strike = make_card("attack-basic")
        state = make_state(player=make_player(mana=0, hand=[strike]))
        after = play_card(state, strike)
        assert after.player == state.player
        assert after.enemy == state.enemy
        assert _messages(after) == ["Not enough mana!"]

    def test_card_not_in_hand(self, make_state, make_card):
        state = make_state()
        assert play_card(state, make_card("attack-basic")) is state

    def test_enemy_turn_ignored(self, make_state, make_player, make_card):
        strike = make_card("attack-basic")
        state = make_state(player=make_player(hand=[strike]), turn=Turn.ENEMY)
        assert play_card(state, strike) is state

    def test_after_battle_ignored(self, make_state, make_player, make_card):
        strike = make_card("attack-basic")
        state = make_state(player=make_player(hand=[strike]), is_over=True, is_victory=True)
        assert play_card(state, strike) is state

    def test_killing_blow_wins(self, make_state, make_player, make_enemy, make_card):
        heavy = make_card("attack-heavy")
        state = make_state(player=make_player(hand=[heavy]), enemy=make_enemy(hp=10))
        state = play_card(state, heavy)
        assert state.is_over and state.is_victory
        assert _messages(state)[-1] == "Goblin was defeated! You won!"
        assert get_phase(state) == CombatPhase.VICTORY

    def test_playable_cards(self, make_state, make_player, make_card):
        cheap, pricey = make_card("attack-basic"), make_card("magic-arcane-blast")
        state = make_state(player=make_player(hand=[cheap, pricey]))
        assert get_playable_cards(state) == [cheap]
        assert get_playable_cards(replace(state, is_over=True)) == []


class TestPiles:

    def test_draw_from_top(self, make_player, make_card, rng):
        cards = [make_card("attack-basic") for _ in range(3)]
        player = draw_cards(make_player(deck=cards), 1, rng)
        assert player.hand == (cards[-1],)
        assert player.deck == tuple(cards[:-1])

    def test_reshuffle_when_empty(self, make_player, make_card, rng):
        discard = [make_card("defense-basic") for _ in range(3)]
        player = draw_cards(make_player(discard=discard), 2, rng)
        assert len(player.hand) == 2
        assert len(player.deck) == 1
        assert player.discard_pile == ()

    def test_draw_limited_by_cards(self, make_player, make_card, rng):
        deck = [make_card("attack-basic") for _ in range(2)]
        discard = [make_card("defense-basic") for _ in range(3)]
        player = draw_cards(make_player(deck=deck, discard=discard), 10, rng)
        assert len(player.hand) == 5
        assert player.deck == () and player.discard_pile == ()

    def test_draw_preserves_cards(self, make_player, make_card, rng):
        deck = [make_card("attack-basic") for _ in range(2)]
        discard = [make_card("defense-basic") for _ in range(4)]
        player = make_player(deck=deck, discard=discard)
        drawn = draw_cards(player, 4, rng)
        assert sorted(c.instance_id for c in drawn.all_cards) == sorted(c.instance_id for c in player.all_cards)

    def test_draw_to_hand_size(self, make_player, make_card, rng):
        hand = [make_card("attack-basic")]
        deck = [make_card("defense-basic") for _ in range(6)]
        player = draw_to_hand_size(make_player(hand=hand, deck=deck), 5, rng)
        assert len(player.hand) == 5
        assert draw_to_hand_size(player, 3, rng).hand == player.hand

    def test_discard_hand(self, make_player, make_card):
        hand = [make_card("attack-basic"), make_card("defense-basic")]
        player = discard_hand(make_player(hand=hand))
        assert player.hand == ()
        assert player.discard_pile == tuple(hand)

    def test_discard_unknown_card(self, make_player):
        player = make_player()
        assert discard_card(player, "missing") is player

    def test_reset_player(self, make_player, make_card, rng):
        player = make_player(
            hp=10, armor=4, mana=0,
            hand=[make_card("attack-basic")],
            discard=[make_card("defense-basic")],
            statuses=[create_poison(1, 2)],
        )
        fresh = reset_player(player, rng)
        assert (fresh.hp, fresh.armor, fresh.mana) == (80, 0, 3)
        assert len(fresh.deck) == 2
        assert fresh.hand == () and fresh.discard_pile == ()
        assert fresh.status_effects == ()


class TestEndTurn:

    def test_full_round(self, rng):
        state = end_turn(start_battle(rng, enemy=GOBLIN), rng)
        assert state.round == 2
        assert state.turn == Turn.PLAYER
        assert state.player.mana == 3
        assert state.player.armor == 0
        assert len(state.player.hand) == 5
        assert state.player.hp in (75, 72)
        messages = _messages(state)
        assert "Enemy turn!" in messages
        assert any(m.startswith("Goblin uses ") for m in messages)
        assert messages[-1] == "Turn 2 - your move!"

    def test_armor_absorbs_enemy_attack(self, make_state, make_player):
        state = make_state(player=make_player(armor=5))
        state = _with_intent(state, EnemyAction(ActionType.ATTACK, 8, "Bite"))
        state = end_turn(state, Random(1))
        assert state.player.hp == 77
        assert state.player.armor == 0

    def test_no_cards_anywhere(self, make_state):
        state = _with_intent(make_state(), GOBLIN.actions[2])
        state = end_turn(state, Random(1))
        assert state.round == 2
        assert state.player.hand == ()
        assert state.player.deck == () and state.player.discard_pile == ()

    def test_intent_is_replayed(self, make_state):
        state = _with_intent(make_state(), GOBLIN.actions[2])
        state = end_turn(state, Random(1))
        assert state.enemy.armor == 3
        assert state.player.hp == 80
        assert "Goblin uses Dodge!" in _messages(state)

    def test_new_intent_each_round(self, make_state):
        state = _with_intent(make_state(), GOBLIN.actions[2])
        state = end_turn(state, Random(1))
        assert state.enemy.intent is not None
        assert state.enemy.intent.action_type == ActionType.ATTACK

    def test_hand_discarded_and_redrawn(self, make_state, make_player, make_card):
        hand = [make_card("attack-basic"), make_card("defense-basic")]
        state = _with_intent(make_state(player=make_player(hand=hand)), GOBLIN.actions[2])
        state = end_turn(state, Random(1))
        assert len(state.player.hand) == 2
        assert state.player.discard_pile == ()

    def test_enemy_dies_to_poison_before_acting(self, make_state, make_enemy):
        enemy = make_enemy(hp=3, status_effects=[create_poison(3, 1)])
        state = _with_intent(make_state(enemy=enemy), EnemyAction(ActionType.ATTACK, 8, "Bite"))
        state = end_turn(state, Random(1))
        assert state.is_over and state.is_victory
        assert state.player.hp == 80
        assert _messages(state)[-1] == "Goblin was defeated! You won!"

    def test_player_dies_to_poison_at_turn_start(self, make_state, make_player):
        player = make_player(hp=2, statuses=[create_poison(5, 2)])
        state = _with_intent(make_state(player=player), GOBLIN.actions[2])
        state = end_turn(state, Random(1))
        assert state.is_over and not state.is_victory
        assert _messages(state)[-1] == "You were defeated!"
        assert get_phase(state) == CombatPhase.DEFEAT

    def test_player_killed_by_attack(self, make_state, make_player):
        state = make_state(player=make_player(hp=5))
        state = _with_intent(state, EnemyAction(ActionType.ATTACK, 8, "Bite"))
        state = end_turn(state, Random(1))
        assert state.is_over and not state.is_victory
        assert state.round == 1

    def test_ignored_after_battle(self, make_state):
        state = make_state(is_over=True)
        assert end_turn(state, Random(1)) is state


class TestCheckGameEnd:

    def test_enemy_checked_first(self, make_state, make_player, make_enemy):
        state = make_state(player=make_player(hp=0), enemy=make_enemy(hp=0))
        state = check_game_end(state)
        assert state.is_over and state.is_victory

    def test_nobody_dead(self, make_state):
        state = make_state()
        assert check_game_end(state) is state

    def test_already_over(self, make_state, make_enemy):
        state = make_state(enemy=make_enemy(hp=0), is_over=True)
        assert check_game_end(state) is state


class TestCombatEngine:

    def test_greedy_policy(self, make_state, make_player, make_card):
        hand = [make_card("attack-basic"), make_card("attack-heavy"), make_card("magic-arcane-blast")]
        state = make_state(player=make_player(hand=hand))
        assert greedy_policy(state).id == "attack-heavy"
        assert greedy_policy(make_state()) is None

    def test_play_card_counts(self, rng):
        engine = CombatEngine.start(rng, enemy=GOBLIN)
        card = engine.get_playable_cards()[0]
        assert engine.play_card(card)
        assert engine.cards_played == 1
        assert not engine.play_card(card)
        assert engine.cards_played == 1

    def test_play_card_at_out_of_range(self, rng):
        engine = CombatEngine.start(rng, enemy=GOBLIN)
        assert not engine.play_card_at(99)
        assert not engine.play_card_at(-1)

    def test_run_beats_goblin(self):
        engine = CombatEngine.start(Random(42), enemy=GOBLIN)
        result = engine.run()
        assert engine.is_over
        assert result.victory
        assert result.enemy_id == "goblin"
        assert result.cards_played > 0
        assert 0 < result.player_hp <= 80
        assert engine.phase == CombatPhase.VICTORY

    def test_run_round_cap(self):
        engine = CombatEngine.start(Random(42), enemy=ORC)
        result = engine.run(policy=lambda state: None, max_rounds=2)
        assert not result.victory
        assert result.cards_played == 0
        assert result.rounds == 3 or engine.is_over

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_runs_finish(self, seed):
        engine = CombatEngine.start(Random(seed), tier="tier2")
        engine.run()
        assert engine.is_over
        assert engine.get_result().victory == engine.state.is_victory
