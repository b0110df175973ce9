"""
Cards, regions and the matching rules of the Venn deduction puzzle.

Every choice and both hidden answers are Cards drawn from the same fixed
catalog. A drop is judged by `region_matches`, which only looks at the
card, the region and the two hidden answers.
"""
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Color(Enum):
    """Fill color of the shape on a card."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"


class Shape(Enum):
    """Outline drawn on a card."""

    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"


class Size(Enum):
    SMALL = "small"
    LARGE = "large"


class Region(Enum):
    """Drop targets of the board."""

    LEFT_ONLY = "left_only"  # answer box above the left circle
    RIGHT_ONLY = "right_only"  # answer box above the right circle
    INTERSECTION = "intersection"
    LEFT_CIRCLE = "left_circle"  # left circle outside the overlap
    RIGHT_CIRCLE = "right_circle"


@dataclass(frozen=True)
class Card:
    color: Color
    shape: Shape
    size: Size

    def attributes(self) -> Tuple[Color, Shape, Size]:
        return (self.color, self.shape, self.size)

    def shared_attributes(self, other: "Card") -> List[Enum]:
        """Attribute values held by both cards, in axis order."""
        return [mine for mine, theirs in zip(self.attributes(), other.attributes()) if mine == theirs]

    def shares_any(self, other: "Card") -> bool:
        return len(self.shared_attributes(other)) > 0

    def __str__(self):
        return f"{self.color.value} {self.size.value} {self.shape.value}"


def build_catalog() -> List[Card]:
    """Every color/shape/size combination, ordered by color, then shape, then size."""
    return [Card(color, shape, size) for color, shape, size in itertools.product(Color, Shape, Size)]


def draw_answers(rng, catalog: List[Card]) -> Tuple[Card, Card]:
    """
    Pick the hidden left and right answers from the catalog.

    The two draws are independent, so both circles can end up with the
    same card.

    Args:
        rng: numpy Generator used for the draw.
        catalog: cards to pick from.
    """
    left_index, right_index = rng.integers(0, len(catalog), size=2)
    return catalog[int(left_index)], catalog[int(right_index)]


def region_matches(card: Card, region: Region, left_answer: Card, right_answer: Card) -> bool:
    """
    Decide whether `card` dropped on `region` is correct.

    The answer boxes ask for the exact hidden card. The circles only ask
    for one shared attribute, and the intersection asks for one shared
    attribute with each answer (not necessarily on the same axis).
    """
    if not isinstance(region, Region):
        raise TypeError(f"region must be a Region, got {type(region).__name__}")

    if region is Region.LEFT_ONLY:
        return card == left_answer
    if region is Region.RIGHT_ONLY:
        return card == right_answer
    if region is Region.INTERSECTION:
        return card.shares_any(left_answer) and card.shares_any(right_answer)
    if region is Region.LEFT_CIRCLE:
        return card.shares_any(left_answer)
    return card.shares_any(right_answer)
