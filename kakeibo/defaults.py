"""Seed data and the fixed category color palette."""

from typing import List

from .models import Category

PALETTE = (
    "red",
    "orange",
    "yellow",
    "green",
    "teal",
    "blue",
    "indigo",
    "purple",
    "pink",
    "gray",
)

# Shown for transactions whose category has been deleted.
UNKNOWN_CATEGORY_NAME = "Unknown"
UNKNOWN_CATEGORY_COLOR = "lightgray"

DEFAULT_CATEGORIES = (
    Category(id="inc-1", name="Salary", type="income", color="blue"),
    Category(id="inc-2", name="Allowance", type="income", color="teal"),
    Category(id="inc-3", name="Other income", type="income", color="gray"),
    Category(id="exp-1", name="Food", type="expense", color="orange"),
    Category(id="exp-2", name="Transport", type="expense", color="teal"),
    Category(id="exp-3", name="Daily goods", type="expense", color="yellow"),
    Category(id="exp-4", name="Social", type="expense", color="pink"),
    Category(id="exp-5", name="Hobby", type="expense", color="purple"),
    Category(id="exp-6", name="Other expense", type="expense", color="gray"),
)


def default_category_records() -> List[dict]:
    """Return fresh JSON-native copies of the seed categories."""
    return [category.to_dict() for category in DEFAULT_CATEGORIES]


def palette_color(index: int) -> str:
    """Cycle through the palette; colors repeat once it is exhausted."""
    return PALETTE[index % len(PALETTE)]
