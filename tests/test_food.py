"""
Tests for Food — placement, variant upgrades, expiry and consumption.
"""

import random

import pytest

from snake_arcade.model import Board, Food, FoodVariant, Position, SpecialEffect


class TestPlacement:
    def test_place_avoids_forbidden_cells(self, food, board):
        """Placement never lands on a forbidden cell."""
        forbidden = {Position(x, y) for x in range(10) for y in range(9)}
        for _ in range(20):
            assert food.place(forbidden) is True
            assert food.position not in forbidden
            assert food.position.y == 9

    def test_single_free_cell_is_found(self, clock):
        """With one free cell the fallback scan finds it even if every roll misses."""
        board = Board(4, 4)
        free = Position(3, 3)
        forbidden = set(board.cells()) - {free}
        food = Food(board, rng=random.Random(0), clock=clock, attempts=0)
        assert food.place(forbidden) is True
        assert food.position == free

    def test_fallback_scan_is_row_major(self, clock):
        """The deterministic fallback picks the first free cell in row-major order."""
        board = Board(3, 3)
        forbidden = {Position(0, 0), Position(1, 0), Position(2, 0)}
        food = Food(board, rng=random.Random(0), clock=clock, attempts=0)
        food.place(forbidden)
        assert food.position == Position(0, 1)

    def test_full_board_leaves_food_inactive(self, food, board, caplog):
        """Every cell forbidden: placement fails quietly and logs a warning."""
        food.place()
        with caplog.at_level("WARNING"):
            assert food.place(set(board.cells())) is False
        assert food.is_active is False
        assert food.position is None
        assert food.render_descriptor() is None
        assert "No free cell" in caplog.text

    def test_place_resets_variant(self, food):
        """A freshly placed item is always normal."""
        food.place()
        food.make_special(FoodVariant.MEGA)
        food.place()
        assert food.variant is FoodVariant.NORMAL
        assert food.value == food.base_points

    def test_place_at_rejects_off_board(self, food):
        """place_at ignores cells outside the board."""
        assert food.place_at(Position(10, 0)) is False
        assert food.is_active is False
        assert food.place_at(Position(9, 9)) is True
        assert food.position == Position(9, 9)

    def test_placement_is_roughly_uniform(self, clock):
        """Over many placements every free cell gets picked."""
        board = Board(3, 3)
        food = Food(board, rng=random.Random(99), clock=clock)
        seen = set()
        for _ in range(300):
            food.place({Position(1, 1)})
            seen.add(food.position)
        assert seen == set(board.cells()) - {Position(1, 1)}


class TestUpgrade:
    def test_chance_grows_with_score_and_is_capped(self, food):
        """Upgrade chance rises with score but never passes 30%."""
        assert food.upgrade_chance(0) == pytest.approx(0.10)
        assert food.upgrade_chance(1000) == pytest.approx(0.15)
        assert food.upgrade_chance(2000) > food.upgrade_chance(1000)
        assert food.upgrade_chance(100_000) == pytest.approx(0.30)

    def test_certain_upgrade_picks_special_variant(self, board, clock):
        """With a 100% chance the item turns into one of the special variants."""
        food = Food(board, rng=random.Random(3), clock=clock, base_chance=1.0, max_chance=1.0)
        food.place()
        assert food.try_upgrade(0) is True
        assert food.variant in (FoodVariant.BONUS, FoodVariant.MEGA, FoodVariant.SPEED)

    def test_only_normal_food_upgrades(self, board, clock):
        """An already special item is not rolled again."""
        food = Food(board, rng=random.Random(3), clock=clock, base_chance=1.0, max_chance=1.0)
        food.place()
        food.make_special(FoodVariant.BONUS)
        assert food.try_upgrade(0) is False
        assert food.variant is FoodVariant.BONUS

    def test_inactive_food_does_not_upgrade(self, board, clock):
        """Nothing to upgrade while the item is off the board."""
        food = Food(board, rng=random.Random(3), clock=clock, base_chance=1.0, max_chance=1.0)
        assert food.try_upgrade(0) is False

    def test_zero_chance_never_upgrades(self, board, clock):
        """A zero cap keeps the item normal forever."""
        food = Food(board, rng=random.Random(3), clock=clock, base_chance=0.0, max_chance=0.0)
        food.place()
        assert not any(food.try_upgrade(score) for score in range(0, 5000, 50))

    @pytest.mark.parametrize(
        "variant, multiplier, size_delta",
        [
            (FoodVariant.BONUS, 2, 2),
            (FoodVariant.MEGA, 5, 4),
            (FoodVariant.SPEED, 1, 0),
        ],
    )
    def test_variant_table(self, food, variant, multiplier, size_delta):
        """Each variant applies its multiplier and size change."""
        food.place()
        food.make_special(variant)
        assert food.value == food.base_points * multiplier
        assert food.size == food.base_size + size_delta

    def test_speed_variant_carries_effect(self, food):
        """Only the speed variant attaches a timed effect."""
        food.place()
        food.make_special(FoodVariant.SPEED)
        assert food.effect == SpecialEffect("speed", 5000, 50)
        food.make_special(FoodVariant.MEGA)
        assert food.effect is None


class TestExpiry:
    def test_special_reverts_in_place_after_ttl(self, food, clock):
        """Past its TTL a special item goes back to normal on the same cell."""
        food.place()
        cell = food.position
        food.make_special(FoodVariant.MEGA)
        clock.advance(10_000)
        assert food.expire() is False
        clock.advance(1)
        assert food.expire() is True
        assert food.variant is FoodVariant.NORMAL
        assert food.value == food.base_points
        assert food.position == cell

    def test_normal_food_never_expires(self, food, clock):
        """Normal items stay put regardless of age."""
        food.place()
        clock.advance(1_000_000)
        assert food.expire() is False
        assert food.is_active

    def test_ttl_counts_from_upgrade_not_spawn(self, food, clock):
        """An item upgraded late still gets its full TTL."""
        food.place()
        clock.advance(9_000)
        food.make_special(FoodVariant.BONUS)
        clock.advance(5_000)
        assert food.expire() is False
        assert food.variant is FoodVariant.BONUS


class TestConsume:
    def test_consume_returns_value_and_deactivates(self, food):
        """consume() hands back the points and effect, then clears the item."""
        food.place()
        food.make_special(FoodVariant.SPEED)
        eaten = food.consume()
        assert eaten.points == food.base_points
        assert eaten.effect is not None and eaten.effect.kind == "speed"
        assert food.is_active is False
        assert food.position is None

    def test_consume_inactive_is_noop(self, food):
        """Consuming nothing yields nothing."""
        eaten = food.consume()
        assert eaten.points == 0
        assert eaten.effect is None
        assert food.is_active is False

    def test_render_descriptor(self, food, clock):
        """The descriptor carries position, size, colour, variant and age."""
        food.place_at(Position(2, 3))
        food.make_special(FoodVariant.BONUS)
        clock.advance(250)
        desc = food.render_descriptor()
        assert desc.position == Position(2, 3)
        assert desc.variant is FoodVariant.BONUS
        assert desc.size == food.base_size + 2
        assert desc.age_ms == 250
