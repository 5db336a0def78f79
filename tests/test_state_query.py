"""
Tests for StateQuery snapshot accessors and the entity projections.
"""
import pygame
import pytest
from pygame.math import Vector2

from entities import CombatSnapshot, Direction, FighterStatus, FighterView, FrameData
from systems import Range, StateQuery


class TestGeometry:
    """Distance, range buckets, corner and facing queries."""

    def test_distance_is_horizontal(self, query, make_fighter):
        """Test distance ignores the vertical axis."""
        bot = make_fighter("bot", 700, 500)
        player = make_fighter("player", 300, 350)

        assert query.distance(bot, player) == 400

    @pytest.mark.parametrize("distance,expected", [
        (0, Range.CLOSE),
        (99, Range.CLOSE),
        (100, Range.MID),
        (249, Range.MID),
        (250, Range.FAR),
        (800, Range.FAR),
    ])
    def test_range_buckets(self, distance, expected):
        """Test range boundaries at 100 and 250 px."""
        assert StateQuery.range_for(distance) is expected

    def test_normalized_distance(self, query, make_fighter, make_snapshot):
        """Test distance is divided by the arena width."""
        bot = make_fighter("bot", 700)
        player = make_fighter("player", 300)

        assert query.normalized_distance(bot, player, make_snapshot(bot, player)) == pytest.approx(0.4)

    @pytest.mark.parametrize("x,cornered", [(50, True), (960, True), (300, False), (500, False)])
    def test_is_cornered(self, query, make_fighter, make_snapshot, x, cornered):
        """Test corner detection within 100 px of either wall."""
        fighter = make_fighter("bot", x)
        assert query.is_cornered(fighter, make_snapshot(fighter)) is cornered

    def test_corner_uses_arena_bounds(self, query, make_fighter):
        """Test a narrower arena moves the walls."""
        fighter = make_fighter("bot", 450)
        snapshot = CombatSnapshot(frame=1, fighters=(fighter,), arena=pygame.Rect(400, 0, 400, 600))

        assert query.is_cornered(fighter, snapshot)

    def test_direction_toward_and_away(self, query, make_fighter):
        """Test toward/away resolve to screen directions."""
        bot = make_fighter("bot", 700)
        player = make_fighter("player", 300)

        assert query.direction_toward(bot, player) is Direction.LEFT
        assert query.direction_away(bot, player) is Direction.RIGHT
        assert query.direction_toward(player, bot) is Direction.RIGHT

    def test_is_approaching(self, query, make_fighter):
        """Test an opponent moving toward the actor is approaching."""
        bot = make_fighter("bot", 300)
        player = make_fighter("player", 700, velocity=(-3, 0))

        assert query.is_approaching(player, bot)
        assert not query.is_retreating(player, bot)

    def test_is_retreating(self, query, make_fighter):
        """Test an opponent moving away is retreating, not approaching."""
        bot = make_fighter("bot", 300)
        player = make_fighter("player", 700, velocity=(3, 0))

        assert query.is_retreating(player, bot)
        assert not query.is_approaching(player, bot)

    def test_slow_drift_is_neither(self, query, make_fighter):
        """Test speeds under the threshold count as standing still."""
        bot = make_fighter("bot", 300)
        player = make_fighter("player", 700, velocity=(-0.3, 0))

        assert not query.is_approaching(player, bot)
        assert not query.is_retreating(player, bot)


class TestStatusPredicates:
    """Recovery, stun, block and jump predicates."""

    def test_recovery_requires_spent_hitboxes(self, query, make_fighter):
        """Test a move counts as recovering only once hitboxes are gone."""
        recovering = make_fighter("player", 300, status=FighterStatus.ATTACK,
                                  current_move="hp", active_hitboxes=0)
        active = make_fighter("player", 300, status=FighterStatus.ATTACK,
                              current_move="hp", active_hitboxes=1)

        assert query.is_in_recovery(recovering)
        assert not query.is_in_recovery(active)

    def test_recovery_heuristic(self, query, make_fighter):
        """Test recovery frames assume a 15-frame move without a table."""
        fighter = make_fighter("player", 300, status=FighterStatus.ATTACK,
                               current_move="hp", move_frame=5)

        assert query.recovery_frames(fighter) == 10

    def test_recovery_from_move_table(self, make_fighter):
        """Test the move table gives exact recovery."""
        query = StateQuery({"hp": FrameData(startup=5, active=3, recovery=12)})
        fighter = make_fighter("player", 300, status=FighterStatus.ATTACK,
                               current_move="hp", move_frame=5)

        assert query.recovery_frames(fighter) == 15

    def test_recovery_never_negative(self, query, make_fighter):
        """Test a move past its heuristic length reports zero."""
        fighter = make_fighter("player", 300, status=FighterStatus.ATTACK,
                               current_move="hp", move_frame=40)

        assert query.recovery_frames(fighter) == 0

    def test_can_act(self, query, make_fighter):
        """Test stun and recovery both prevent acting."""
        free = make_fighter("bot", 700)
        stunned = make_fighter("bot", 700, status=FighterStatus.HITSTUN, stun_frames_remaining=4)
        recovering = make_fighter("bot", 700, status=FighterStatus.ATTACK, current_move="hk")

        assert query.can_act(free)
        assert not query.can_act(stunned)
        assert not query.can_act(recovering)

    def test_blocking_and_jumping(self, query, make_fighter):
        """Test blockstun counts as blocking and airborne as jumping."""
        assert query.is_blocking(make_fighter("player", 300, status=FighterStatus.BLOCKSTUN))
        assert query.is_jumping(make_fighter("player", 300, is_grounded=False))
        assert not query.is_jumping(make_fighter("player", 300))

    def test_is_move_unsafe(self, query):
        """Test heavy and special moves are flagged unsafe."""
        assert query.is_move_unsafe("hk")
        assert query.is_move_unsafe("special_fireball")
        assert not query.is_move_unsafe("lp")
        assert not query.is_move_unsafe(None)

    def test_is_in_combo(self, query, make_fighter):
        """Test combo state expires after the combo window."""
        fighter = make_fighter("player", 300, combo_count=2, last_hit_by_frame=90)

        assert query.is_in_combo(fighter, 100)
        assert not query.is_in_combo(fighter, 200)

    def test_resource_ratios(self, query):
        """Test health and super meter ratios read through from the view."""
        fighter = FighterView.from_entity({"id": "bot", "health": 150, "max_health": 200,
                                           "super_meter": 30, "max_super_meter": 100})

        assert query.health_ratio(fighter) == pytest.approx(0.75)
        assert query.super_meter_ratio(fighter) == pytest.approx(0.3)
        assert query.super_meter_ratio(FighterView(id="bot")) == 0.0

    def test_action_tag(self, query, make_fighter):
        """Test the pattern tag is the status, suffixed with any move id."""
        attacking = make_fighter("player", 300, status=FighterStatus.ATTACK, current_move="lk")

        assert query.action_tag(attacking) == "attack:lk"
        assert query.action_tag(make_fighter("player", 300, status=FighterStatus.CROUCH)) == "crouch"
        assert query.last_action(make_fighter("player", 300)) == "idle"


class TestProjection:
    """FighterView and CombatSnapshot construction from simulation data."""

    def test_get_entity_handles_missing(self, query, make_snapshot):
        """Test lookups never raise on missing snapshot or id."""
        assert query.get_entity(None, "bot") is None
        assert query.get_entity(make_snapshot(), "ghost") is None
        assert query.get_entity(make_snapshot(), "bot").id == "bot"

    def test_view_copies_vectors(self):
        """Test later mutation of the caller's vector does not leak in."""
        position = Vector2(100, 500)
        view = FighterView(id="bot", position=position)
        position.x = 900

        assert view.x == 100

    def test_unknown_status_falls_back_to_idle(self):
        """Test an unrecognised status string parses to idle."""
        assert FighterView(id="bot", status="dizzy").status is FighterStatus.IDLE
        assert FighterView(id="bot", status="HITSTUN").status is FighterStatus.HITSTUN

    def test_from_entity_mapping(self):
        """Test projection from a plain mapping with value/max pairs."""
        view = FighterView.from_entity({
            "id": "player",
            "position": (320, 500),
            "health": 50,
            "max_health": 200,
            "status": "attack",
            "current_move": "lp",
            "active_hitboxes": [object(), object()],
            "facing": -1,
        })

        assert view.health_ratio == pytest.approx(0.25)
        assert view.status is FighterStatus.ATTACK
        assert view.active_hitboxes == 2
        assert view.facing == -1

    def test_from_state_with_bounds_mapping(self):
        """Test arena bounds given as left/right edges."""
        snapshot = CombatSnapshot.from_state(
            7, [{"id": "bot", "position": (700, 500)}],
            arena={"left_bound": 100, "right_bound": 900},
        )

        assert snapshot.frame == 7
        assert snapshot.arena.left == 100
        assert snapshot.arena.right == 900
        assert snapshot.arena_width == 800
        assert snapshot.get("bot").x == 700
