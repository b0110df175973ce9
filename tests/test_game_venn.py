"""Tests for the drag-and-drop environment."""

import logging

import numpy as np
import pytest

from conftest import LEFT_ANSWER, RIGHT_ANSWER, choice_for, drag
from venn_deduction.cards import Card, Color, Region, Shape, Size
from venn_deduction.game_venn import VennDeductionEnv


LEFT_LUNE = (200, 280)
RIGHT_LUNE = (600, 280)
OUTSIDE = (20, 300)


def test_spaces_and_reset(env):
    obs, info = env.reset()
    assert obs.shape == (600, 800, 3)
    assert obs.dtype == np.uint8
    assert env.action_space.nvec.tolist() == [5, 2, 2]
    assert info == {"steps": 0, "placed": 0, "green": 0, "red": 0}
    assert len(env.choices) == 18
    assert all(c['region'] is None and c['matches'] is None for c in env.choices)


def test_validate_implementation(env):
    env.validate_implementation()


def test_seeded_reset_draws_same_answers():
    game = VennDeductionEnv()
    game.reset(seed=11)
    first = (game.left_answer, game.right_answer)
    game.reset(seed=11)
    assert (game.left_answer, game.right_answer) == first
    game.close()


def test_reset_rejects_non_card_answer(env):
    with pytest.raises(ValueError):
        env.reset(options={"left_answer": ("red", "circle", "small")})


def test_intersection_drop_turns_green(env):
    card = Card(Color.RED, Shape.SQUARE, Size.LARGE)
    choice = choice_for(env, card)
    obs, reward, terminated, truncated, info = drag(env, choice['home'], env.INTERSECTION_CENTER)

    assert choice['region'] is Region.INTERSECTION
    assert choice['matches'] is True
    assert choice['pos'] == list(env.INTERSECTION_CENTER)
    assert info["placed"] == 1
    assert info["green"] == 1
    assert reward == 0.0
    assert not terminated and not truncated

    x, y = env.INTERSECTION_CENTER
    assert tuple(obs[y, x + 18]) == env.COLOR_MATCH


def test_answer_box_needs_exact_card(env):
    wrong = choice_for(env, Card(Color.RED, Shape.SQUARE, Size.LARGE))
    obs, _, _, _, info = drag(env, wrong['home'], env.LEFT_BOX_CENTER)
    assert wrong['region'] is Region.LEFT_ONLY
    assert wrong['matches'] is False
    assert info["red"] == 1

    x, y = env.LEFT_BOX_CENTER
    assert tuple(obs[y, x + 18]) == env.COLOR_MISMATCH

    right = choice_for(env, LEFT_ANSWER)
    drag(env, right['home'], env.LEFT_BOX_CENTER)
    assert right['matches'] is True


def test_right_answer_box(env):
    choice = choice_for(env, RIGHT_ANSWER)
    drag(env, choice['home'], env.RIGHT_BOX_CENTER)
    assert choice['region'] is Region.RIGHT_ONLY
    assert choice['matches'] is True


def test_circle_outside_overlap(env):
    hit = choice_for(env, Card(Color.GREEN, Shape.CIRCLE, Size.LARGE))
    drag(env, hit['home'], LEFT_LUNE)
    assert hit['region'] is Region.LEFT_CIRCLE
    assert hit['matches'] is True

    miss = choice_for(env, Card(Color.GREEN, Shape.TRIANGLE, Size.LARGE))
    drag(env, miss['home'], LEFT_LUNE)
    assert miss['region'] is Region.LEFT_CIRCLE
    assert miss['matches'] is False

    drag(env, miss['pos'], RIGHT_LUNE)
    assert miss['region'] is Region.RIGHT_CIRCLE
    assert miss['matches'] is True


def test_drop_outside_returns_to_catalog(env):
    choice = choice_for(env, Card(Color.BLUE, Shape.TRIANGLE, Size.SMALL))
    drag(env, choice['home'], env.INTERSECTION_CENTER)
    assert choice['region'] is Region.INTERSECTION

    _, _, _, _, info = drag(env, choice['pos'], OUTSIDE)
    assert choice['pos'] == list(choice['home'])
    assert choice['region'] is None
    assert choice['matches'] is None
    assert info["placed"] == 0


def test_pick_up_clears_feedback(env):
    choice = choice_for(env, LEFT_ANSWER)
    drag(env, choice['home'], env.LEFT_BOX_CENTER)
    assert choice['matches'] is True

    env.move_cursor_to(choice['pos'])
    env.step([0, 1, 0])
    assert choice['dragged'] is True
    assert choice['matches'] is None
    assert env.drag_index == env.choices.index(choice)


def test_dragged_choice_follows_cursor(env):
    choice = env.choices[0]
    env.move_cursor_to(choice['home'])
    env.step([0, 1, 0])
    for _ in range(3):
        env.step([4, 1, 0])
    assert choice['pos'] == [choice['home'][0] + 3 * env.CURSOR_SPEED, choice['home'][1]]


def test_press_on_empty_space_grabs_nothing(env):
    env.move_cursor_to(OUTSIDE)
    env.step([0, 1, 0])
    assert env.drag_index is None
    env.step([0, 0, 0])
    assert all(c['region'] is None for c in env.choices)


def test_holding_over_a_choice_does_not_grab_it(env):
    env.move_cursor_to(OUTSIDE)
    env.step([0, 1, 0])
    env.move_cursor_to(env.choices[0]['home'])
    env.step([0, 1, 0])
    assert env.drag_index is None


def test_cursor_is_clamped(env):
    env.move_cursor_to((5, 5))
    env.step([1, 0, 0])
    env.step([3, 0, 0])
    assert env.cursor_pos == [0, 0]
    env.move_cursor_to((10000, 10000))
    assert env.cursor_pos == [env.SCREEN_WIDTH - 1, env.SCREEN_HEIGHT - 1]


def test_reset_restores_catalog(env):
    choice = env.choices[3]
    drag(env, choice['home'], env.INTERSECTION_CENTER)
    _, info = env.reset()
    assert info["placed"] == 0
    assert env.drag_index is None
    assert [c['pos'] for c in env.choices] == [list(c['home']) for c in env.choices]


def test_identical_answers_are_logged(caplog):
    game = VennDeductionEnv()
    with caplog.at_level(logging.WARNING, logger="venn_deduction"):
        game.reset(options={"left_answer": LEFT_ANSWER, "right_answer": LEFT_ANSWER})
    assert "same card" in caplog.text
    game.close()
