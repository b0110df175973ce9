from venn_deduction.cards import Card, Color, Region, Shape, Size, build_catalog, draw_answers, region_matches
from venn_deduction.game_venn import VennDeductionEnv

__all__ = [
    "Card",
    "Color",
    "Region",
    "Shape",
    "Size",
    "VennDeductionEnv",
    "build_catalog",
    "draw_answers",
    "region_matches",
]
