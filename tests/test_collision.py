"""
Tests for collision.py — boundary, self and food classification.
"""

from collections import deque

from snake_arcade.collision import (
    CollisionLog, classify, is_position_safe, predict, safe_moves,
)
from snake_arcade.model import Board, Direction, FoodVariant, Position, Snake


def _snake_with_body(board, cells, direction=Direction.RIGHT):
    snake = Snake(board, initial_length=1, direction=direction)
    snake.body = deque(Position(*c) for c in cells)
    return snake


class TestBoundary:
    def test_head_one_past_last_column_is_boundary(self, food):
        """x == columns is a right-edge hit; x == columns - 1 is fine."""
        board = Board(5, 5)
        inside = _snake_with_body(board, [(4, 2), (3, 2)])
        outside = _snake_with_body(board, [(5, 2), (4, 2)])
        assert not classify(inside, food, board).boundary.detected
        report = classify(outside, food, board)
        assert report.boundary.detected
        assert report.boundary.side == "right"
        assert report.lethal

    def test_each_edge_is_tagged(self, food):
        """Every edge reports its own side."""
        board = Board(5, 5)
        for head, side in [((-1, 0), "left"), ((0, -1), "top"), ((0, 5), "bottom")]:
            snake = _snake_with_body(board, [head])
            assert classify(snake, food, board).boundary.side == side


class TestSelf:
    def test_head_is_not_compared_with_itself(self, food):
        """A single-segment snake never collides with itself."""
        board = Board(5, 5)
        snake = _snake_with_body(board, [(2, 2)])
        assert not classify(snake, food, board).self_hit.detected

    def test_head_on_body_is_self_collision(self, food):
        """Head sharing a cell with a later segment is lethal and names the index."""
        board = Board(6, 6)
        snake = _snake_with_body(board, [(2, 2), (3, 2), (3, 3), (2, 3), (2, 2)])
        report = classify(snake, food, board)
        assert report.self_hit.detected
        assert report.self_hit.segment_index == 4
        assert report.lethal

    def test_boxed_in_snake_dies_on_step(self, food):
        """Turning into its own side kills the snake."""
        board = Board(8, 8)
        snake = _snake_with_body(board, [(3, 3), (3, 4), (4, 4), (4, 3), (4, 2)], Direction.UP)
        snake.change_direction(Direction.RIGHT)
        snake.step()
        assert classify(snake, food, board).self_hit.detected


class TestFood:
    def test_food_hit_reports_value(self, food, board):
        """Head on the item reports its points and is not lethal."""
        snake = _snake_with_body(board, [(4, 4), (3, 4)])
        food.place_at(Position(4, 4))
        food.make_special(FoodVariant.BONUS)
        report = classify(snake, food, board)
        assert report.food.detected
        assert report.food.points == food.base_points * 2
        assert not report.lethal
        assert report.any

    def test_inactive_food_never_hits(self, food, board):
        """An item that is not on the board cannot be eaten."""
        snake = _snake_with_body(board, [(0, 0)])
        report = classify(snake, food, board)
        assert not report.food.detected
        assert not report.any

    def test_all_flags_computed_together(self, food, board):
        """Food and self flags are both reported for the same head."""
        snake = _snake_with_body(board, [(2, 2), (2, 3), (3, 3), (3, 2), (2, 2)])
        food.place_at(Position(2, 2))
        report = classify(snake, food, board)
        assert report.self_hit.detected
        assert report.food.detected
        assert report.lethal


class TestPredict:
    def test_predict_does_not_move_snake(self, food):
        """predict classifies the next head and leaves the snake untouched."""
        board = Board(5, 5)
        snake = _snake_with_body(board, [(4, 1), (3, 1)])
        before = list(snake.body)
        report = predict(snake, food, board)
        assert report.position == Position(5, 1)
        assert report.boundary.side == "right"
        assert list(snake.body) == before

    def test_predict_ignores_vacating_tail(self, food):
        """Chasing the tail is safe because the tail moves away on the same step."""
        board = Board(6, 6)
        snake = _snake_with_body(board, [(2, 2), (2, 3), (3, 3), (3, 2)], Direction.UP)
        snake.change_direction(Direction.RIGHT)
        assert not predict(snake, food, board).self_hit.detected

    def test_predict_counts_tail_when_growing(self, food):
        """With growth pending the tail stays, so moving onto it is lethal."""
        board = Board(6, 6)
        snake = _snake_with_body(board, [(2, 2), (2, 3), (3, 3), (3, 2)], Direction.UP)
        snake.change_direction(Direction.RIGHT)
        snake.request_growth()
        assert predict(snake, food, board).self_hit.detected

    def test_predict_matches_step_outcome(self, food):
        """Prediction agrees with classifying after the real step."""
        board = Board(6, 6)
        snake = _snake_with_body(board, [(3, 3), (3, 4), (4, 4), (4, 3), (4, 2)], Direction.UP)
        snake.change_direction(Direction.RIGHT)
        predicted = predict(snake, food, board)
        snake.step()
        actual = classify(snake, food, board)
        assert predicted.lethal == actual.lethal
        assert predicted.position == actual.position


class TestSafety:
    def test_is_position_safe(self, board):
        """Off-board and body cells are unsafe."""
        snake = Snake(board)
        assert not is_position_safe(Position(-1, 0), snake, board)
        assert not is_position_safe(snake.tail, snake, board)
        assert is_position_safe(Position(0, 0), snake, board)

    def test_safe_moves_excludes_reversal_and_walls(self):
        """In a corner facing the wall only the open side remains."""
        board = Board(5, 5)
        snake = _snake_with_body(board, [(4, 0), (3, 0)])
        assert safe_moves(snake, board) == [Direction.DOWN]


class TestCollisionLog:
    def test_records_hits_and_counts_by_kind(self, food, board):
        """Only reports with a hit are kept, tallied per kind."""
        log = CollisionLog()
        snake = _snake_with_body(board, [(5, 5), (4, 5)])
        log.record(classify(snake, food, board), at=1.0)
        assert len(log) == 0

        food.place_at(Position(5, 5))
        log.record(classify(snake, food, board), at=2.0)
        off_board = _snake_with_body(board, [(10, 5), (9, 5)])
        log.record(classify(off_board, food, board), at=3.0)

        stats = log.statistics()
        assert stats["total"] == 2
        assert stats["by_kind"] == {"boundary": 1, "self": 0, "food": 1}
        assert [at for at, _ in log.history()] == [2.0, 3.0]

    def test_history_keeps_only_the_latest(self, food):
        """Past the limit the oldest entries drop off."""
        board = Board(5, 5)
        log = CollisionLog(limit=3)
        snake = _snake_with_body(board, [(5, 0), (4, 0)])
        for i in range(5):
            log.record(classify(snake, food, board), at=float(i))
        assert len(log) == 3
        assert [at for at, _ in log.history()] == [2.0, 3.0, 4.0]
        assert len(log.statistics(recent=2)["recent"]) == 2
        log.clear()
        assert len(log) == 0
