"""
Tests for the defensive, offensive and spacing tactics modules.
"""
import pytest

from entities import Button, Direction, FighterStatus, IDLE
from tactics import (
    DefensiveWeights,
    OffensiveWeights,
    PolicyState,
    SpacingWeights,
)


class TestDefensiveTactics:
    """Punish, anti-air, block and spacing proposers."""

    @pytest.mark.parametrize("recovery,distance,button", [
        (20, 70, Button.HEAVY_PUNCH),
        (12, 90, Button.LIGHT_KICK),
        (7, 110, Button.LIGHT_PUNCH),
    ])
    def test_calculate_punish(self, defensive, recovery, distance, button):
        """Test heavier punishes for longer recovery at shorter range."""
        assert defensive.calculate_punish(recovery, distance).button is button

    @pytest.mark.parametrize("recovery,distance", [(4, 100), (20, 200)])
    def test_calculate_punish_unsafe(self, defensive, recovery, distance):
        """Test no punish when the window is too short or too far."""
        assert defensive.calculate_punish(recovery, distance) is None

    def test_anti_air_ranges(self, defensive, make_fighter):
        """Test standing anti-air close, crouching anti-air at mid range."""
        bot = make_fighter("bot", 700)

        close = defensive.anti_air(bot, make_fighter("player", 600, is_grounded=False))
        mid = defensive.anti_air(bot, make_fighter("player", 550, is_grounded=False))
        far = defensive.anti_air(bot, make_fighter("player", 400, is_grounded=False))

        assert close.button is Button.HEAVY_PUNCH and close.direction is Direction.NEUTRAL
        assert mid.button is Button.HEAVY_PUNCH and mid.direction is Direction.DOWN
        assert far is None
        assert defensive.anti_air(bot, make_fighter("player", 600)) is None

    def test_block_height(self, defensive, make_fighter):
        """Test low attacks are blocked crouching."""
        low = defensive.block(make_fighter("player", 600, current_move="lk"))
        high = defensive.block(make_fighter("player", 600, current_move="hp"))

        assert low.direction is Direction.DOWN and low.button is Button.BLOCK
        assert high.direction is Direction.NEUTRAL and high.button is Button.BLOCK
        assert high.hold_duration == 3

    def test_maintain_spacing_dead_band(self, defensive, make_fighter):
        """Test spacing holds still within ±30 px of the target."""
        bot = make_fighter("bot", 700)

        assert defensive.maintain_spacing(bot, make_fighter("player", 560), 150) == IDLE
        assert defensive.maintain_spacing(bot, make_fighter("player", 650), 150).direction is Direction.RIGHT
        assert defensive.maintain_spacing(bot, make_fighter("player", 400), 150).direction is Direction.LEFT

    def test_counter_attack_punishes_recovery(self, defensive, make_fighter):
        """Test counter attack only fires into recovery."""
        bot = make_fighter("bot", 700)
        recovering = make_fighter("player", 640, status=FighterStatus.ATTACK, current_move="hk")

        assert defensive.counter_attack(bot, recovering).button is Button.HEAVY_PUNCH
        assert defensive.counter_attack(bot, make_fighter("player", 640)) is None

    def test_escape_pressure(self, defensive, make_fighter, make_context):
        """Test escape jumps out of the corner, otherwise backs off."""
        cornered = make_context(make_fighter("bot", 960), make_fighter("player", 900))
        open_space = make_context(make_fighter("bot", 700), make_fighter("player", 640))

        assert defensive.escape_pressure(cornered).direction is Direction.UP
        assert defensive.escape_pressure(open_space).direction is Direction.RIGHT

    def test_fixed_reactions(self, defensive):
        """Test throw tech is a light punch and wake-up blocks for five frames."""
        assert defensive.tech_throw().button is Button.LIGHT_PUNCH
        wakeup = defensive.wakeup_defense()

        assert wakeup.button is Button.BLOCK
        assert wakeup.direction is Direction.NEUTRAL
        assert wakeup.hold_duration == 5

    def test_block_rate_matches_probability(self, defensive, make_fighter, make_context, attacking):
        """Test blocking happens at about the requested rate."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 620, **attacking))
        weights = DefensiveWeights(block_probability=0.7, anti_air_accuracy=0.5)

        blocks = 0
        for _ in range(1000):
            action = defensive.get_defensive_priority(ctx, weights)
            if action is not None and action.button is Button.BLOCK:
                blocks += 1

        assert 600 <= blocks <= 800

    def test_no_block_at_frame_advantage(self, defensive, make_fighter, make_context, attacking):
        """Test the bot does not block while it has the advantage."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 620, **attacking),
                           advantage=3)

        assert not defensive.should_block(ctx, 1.0)

    def test_priority_prefers_punish(self, defensive, make_fighter, make_context):
        """Test a punishable recovery wins over everything else."""
        ctx = make_context(
            make_fighter("bot", 700),
            make_fighter("player", 640, status=FighterStatus.ATTACK, current_move="hk"),
        )
        action = defensive.get_defensive_priority(ctx, DefensiveWeights(1.0, 1.0))

        assert action.button is Button.HEAVY_PUNCH

    def test_priority_none_when_quiet(self, defensive, make_fighter, make_context):
        """Test nothing defensive is proposed in neutral."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 300))
        assert defensive.get_defensive_priority(ctx, DefensiveWeights(1.0, 1.0)) is None


class TestOffensiveTactics:
    """Frame traps, throws, combos and mix-ups."""

    def test_frame_trap_window(self, offensive, make_fighter):
        """Test the trap fires in the last 1-4 frames of blockstun."""
        tail = make_fighter("player", 650, status=FighterStatus.BLOCKSTUN, stun_frames_remaining=3)
        early = make_fighter("player", 650, status=FighterStatus.BLOCKSTUN, stun_frames_remaining=6)

        assert offensive.frame_trap(tail).button is Button.LIGHT_PUNCH
        assert offensive.frame_trap(early) is None
        assert offensive.should_frame_trap(tail, 1.0)
        assert not offensive.should_frame_trap(tail, 0.0)

    def test_should_throw(self, offensive, make_fighter):
        """Test throws need a blocking opponent inside 60 px."""
        blocking = make_fighter("player", 650, status=FighterStatus.BLOCK)

        assert offensive.should_throw(blocking, 50, 1.0)
        assert not offensive.should_throw(blocking, 80, 1.0)
        assert not offensive.should_throw(make_fighter("player", 650), 50, 1.0)

    def test_tick_throw_counts_setups(self, offensive, make_fighter, make_context):
        """Test tick throws build and spend the setup counter."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 660))

        for _ in range(50):
            assert offensive.tick_throw(ctx).button is Button.LIGHT_PUNCH
            assert ctx.memory.pressure_count <= 50

        far = make_context(make_fighter("bot", 700), make_fighter("player", 500))
        offensive.tick_throw(far)
        assert far.memory.pressure_count == 0

    def test_combo_continuation(self, offensive):
        """Test the combo route is lk then hp then nothing."""
        assert offensive.combo_continuation(1).button is Button.LIGHT_KICK
        assert offensive.combo_continuation(2).button is Button.HEAVY_PUNCH
        assert offensive.combo_continuation(3) is None

    def test_combo_starter(self, offensive):
        """Test starters need advantage and scale with range."""
        assert offensive.combo_starter(50, has_advantage=False) is None
        assert offensive.combo_starter(50, has_advantage=True).button is Button.LIGHT_PUNCH
        assert offensive.combo_starter(150, has_advantage=True).button is Button.LIGHT_KICK
        assert offensive.combo_starter(400, has_advantage=True).button is Button.HEAVY_PUNCH

    def test_pressure_string_cycle(self, offensive):
        """Test the pressure string is lp, lk, lp in three-frame blocks."""
        buttons = [offensive.pressure_string(p).button for p in range(9)]

        assert buttons == [Button.LIGHT_PUNCH] * 3 + [Button.LIGHT_KICK] * 3 + [Button.LIGHT_PUNCH] * 3
        assert offensive.pressure_string(9).button is Button.LIGHT_PUNCH

    def test_reset_pressure(self, offensive):
        """Test a pressure reset is a two-frame neutral pause."""
        action = offensive.reset_pressure()

        assert action.direction is Direction.NEUTRAL
        assert action.button is Button.NONE
        assert action.hold_duration == 2

    def test_mixup_never_repeats_at_full_rate(self, offensive):
        """Test a repeat is always flipped when the mix-up rate is 1."""
        memory = PolicyState()
        choices = []
        for _ in range(300):
            offensive.mixup_attack(50, 1.0, memory)
            choices.append(memory.last_mixup)

        assert all(a != b for a, b in zip(choices, choices[1:]))
        assert set(choices) == {"high", "low", "throw"}

    def test_mixup_commands(self, offensive):
        """Test each mix-up choice maps to its command."""
        memory = PolicyState()
        for _ in range(200):
            action = offensive.mixup_attack(50, 0.5, memory)
            if memory.last_mixup == "low":
                assert action.direction is Direction.DOWN and action.button is Button.LIGHT_KICK
            else:
                assert action.button is Button.LIGHT_PUNCH

    def test_aggressive_approach(self, offensive, make_fighter):
        """Test dash from far, walk or jump from mid, hold when close."""
        bot = make_fighter("bot", 700)

        dash = offensive.aggressive_approach(bot, make_fighter("player", 300))
        mid = offensive.aggressive_approach(bot, make_fighter("player", 550))
        close = offensive.aggressive_approach(bot, make_fighter("player", 650))

        assert dash.direction is Direction.LEFT and dash.hold_duration == 3
        assert mid.direction in (Direction.LEFT, Direction.UP)
        assert close == IDLE

    def test_priority_frame_trap_first(self, offensive, make_fighter, make_context):
        """Test a frame trap beats the close mix-up."""
        ctx = make_context(
            make_fighter("bot", 700),
            make_fighter("player", 650, status=FighterStatus.BLOCKSTUN, stun_frames_remaining=2),
        )
        action = offensive.get_offensive_priority(ctx, OffensiveWeights(1.0, 0.0, 0.5))

        assert action.button is Button.LIGHT_PUNCH
        assert ctx.memory.last_mixup is None

    def test_priority_combo(self, offensive, make_fighter, make_context):
        """Test a live combo continues at mid range."""
        ctx = make_context(make_fighter("bot", 700, combo_count=1), make_fighter("player", 550))
        action = offensive.get_offensive_priority(ctx, OffensiveWeights(0.0, 0.0, 0.5))

        assert action.button is Button.LIGHT_KICK

    def test_priority_none_at_mid_range(self, offensive, make_fighter, make_context):
        """Test nothing is proposed at mid range with no openings."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 550))
        assert offensive.get_offensive_priority(ctx, OffensiveWeights(1.0, 1.0, 1.0)) is None


class TestSpacingTactics:
    """Projectiles, zone distance and footsies."""

    def test_projectile_cooldown(self, spacing):
        """Test a second projectile waits 60 frames."""
        memory = PolicyState()

        assert spacing.fire_projectile(100, memory).button is Button.HEAVY_PUNCH
        assert spacing.fire_projectile(130, memory) is None
        assert spacing.fire_projectile(160, memory) is not None
        assert memory.projectile_count == 2
        assert memory.last_projectile_frame == 160

    def test_should_fire_projectile_range(self, spacing):
        """Test projectiles are only fired between 200 and 500 px."""
        memory = PolicyState()

        assert spacing.should_fire_projectile(100, 300, 1.0, memory)
        assert not spacing.should_fire_projectile(100, 150, 1.0, memory)
        assert not spacing.should_fire_projectile(100, 600, 1.0, memory)
        assert not spacing.should_fire_projectile(100, 300, 0.0, memory)

    def test_zone_dead_band(self, spacing, make_fighter):
        """Test zone spacing converges on 250 px with a ±30 dead-band."""
        bot = make_fighter("bot", 700)

        hold = spacing.maintain_zone_distance(bot, make_fighter("player", 440), 250)
        back = spacing.maintain_zone_distance(bot, make_fighter("player", 500), 250)
        forward = spacing.maintain_zone_distance(bot, make_fighter("player", 300), 250)

        assert hold == IDLE
        assert back.direction is Direction.RIGHT and back.hold_duration == 2
        assert forward.direction is Direction.LEFT

    def test_corner_escape(self, spacing, make_fighter, make_context):
        """Test corner escape jumps when pinned, walks out otherwise."""
        pinned = make_context(make_fighter("bot", 960), make_fighter("player", 900))
        roomy = make_context(make_fighter("bot", 960), make_fighter("player", 820))

        assert spacing.corner_escape(pinned).direction is Direction.UP
        assert spacing.corner_escape(roomy).direction is Direction.RIGHT

    def test_space_reset(self, spacing, make_fighter, make_context):
        """Test space reset backs off, or jumps out of a corner."""
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 640))
        cornered = make_context(make_fighter("bot", 960), make_fighter("player", 900))

        assert spacing.space_reset(ctx).hold_duration == 3
        assert spacing.space_reset(cornered).direction is Direction.UP

    def test_anti_approach(self, spacing, make_fighter):
        """Test approaching opponents are poked or anti-aired."""
        bot = make_fighter("bot", 700)
        walking = make_fighter("player", 600, velocity=(3, 0))
        jumping = make_fighter("player", 520, velocity=(3, 0), is_grounded=False)
        standing = make_fighter("player", 600)

        assert spacing.anti_approach(bot, walking).button is Button.LIGHT_KICK
        assert spacing.anti_approach(bot, jumping).button is Button.HEAVY_PUNCH
        assert spacing.anti_approach(bot, standing) is None

    def test_whiff_punish(self, spacing, make_fighter):
        """Test whiffs are punished close and walked into from mid."""
        whiffing = dict(status=FighterStatus.ATTACK, current_move="lp", active_hitboxes=1)

        near = spacing.whiff_punish(make_fighter("bot", 700), make_fighter("player", 590, **whiffing))
        mid = spacing.whiff_punish(make_fighter("bot", 700), make_fighter("player", 540, **whiffing))

        assert near.button is Button.LIGHT_KICK
        assert mid.direction is Direction.LEFT
        assert spacing.whiff_punish(make_fighter("bot", 700), make_fighter("player", 540)) is None

    def test_retreat(self, spacing, make_fighter):
        """Test retreat walks away from the opponent on either side."""
        bot = make_fighter("bot", 700)

        assert spacing.retreat(bot, make_fighter("player", 300)).direction is Direction.RIGHT
        assert spacing.retreat(bot, make_fighter("player", 900)).direction is Direction.LEFT
        assert spacing.retreat(bot, make_fighter("player", 300)).button is Button.NONE

    def test_zone_with_normals_split(self, spacing):
        """Test normals split 40/30/30 between lk, hp and a low sweep."""
        counts = {"lk": 0, "hp": 0, "sweep": 0}
        for _ in range(1000):
            action = spacing.zone_with_normals()
            if action.direction is Direction.DOWN:
                assert action.button is Button.LIGHT_KICK
                counts["sweep"] += 1
            elif action.button is Button.LIGHT_KICK:
                counts["lk"] += 1
            else:
                assert action.button is Button.HEAVY_PUNCH
                counts["hp"] += 1

        assert 340 <= counts["lk"] <= 460
        assert 240 <= counts["hp"] <= 360
        assert 240 <= counts["sweep"] <= 360

    def test_poke(self, spacing):
        """Test close pokes are light punches, longer pokes kick or punch."""
        assert spacing.poke(50).button is Button.LIGHT_PUNCH
        assert spacing.poke(180).button in (Button.LIGHT_KICK, Button.HEAVY_PUNCH)

    def test_priority_fires_then_holds_zone(self, spacing, make_fighter, make_context):
        """Test projectile first, then zone spacing during the cooldown."""
        memory = PolicyState()
        weights = SpacingWeights(optimal_distance=250, projectile_rate=1.0, poke_rate=0.0)
        bot, player = make_fighter("bot", 700), make_fighter("player", 400)

        first = spacing.get_spacing_priority(make_context(bot, player, frame=100, memory=memory), weights)
        second = spacing.get_spacing_priority(make_context(bot, player, frame=110, memory=memory), weights)

        assert first.button is Button.HEAVY_PUNCH
        assert memory.last_projectile_frame == 100
        assert second.direction is Direction.LEFT
        assert second.button is Button.NONE

    def test_priority_pokes_approach(self, spacing, make_fighter, make_context):
        """Test an approaching opponent is poked when projectiles are off."""
        weights = SpacingWeights(optimal_distance=250, projectile_rate=0.0, poke_rate=1.0)
        ctx = make_context(make_fighter("bot", 700), make_fighter("player", 550, velocity=(3, 0)))

        assert spacing.get_spacing_priority(ctx, weights).button in (
            Button.LIGHT_KICK, Button.HEAVY_PUNCH,
        )
