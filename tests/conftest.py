import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

from venn_deduction.cards import Card, Color, Shape, Size
from venn_deduction.game_venn import VennDeductionEnv


LEFT_ANSWER = Card(Color.RED, Shape.CIRCLE, Size.SMALL)
RIGHT_ANSWER = Card(Color.BLUE, Shape.SQUARE, Size.LARGE)


@pytest.fixture
def env():
    """Environment with the left/right answers pinned."""
    game = VennDeductionEnv()
    game.reset(seed=0, options={"left_answer": LEFT_ANSWER, "right_answer": RIGHT_ANSWER})
    yield game
    game.close()


def choice_for(env, card):
    return next(c for c in env.choices if c['card'] == card)


def drag(env, start, end):
    """Press at `start`, carry to `end`, release. Returns the last step result."""
    env.move_cursor_to(start)
    env.step([0, 1, 0])
    env.move_cursor_to(end)
    env.step([0, 1, 0])
    return env.step([0, 0, 0])
