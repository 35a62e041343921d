"""Map upstream place types to a single display category."""

DEFAULT_CATEGORY = "Point of Interest"

# Checked in order; the first matching rule wins.
_CATEGORY_RULES: list[tuple[frozenset[str], str]] = [
    (frozenset({"restaurant"}), "Restaurant"),
    (frozenset({"cafe"}), "Cafe"),
    (frozenset({"bar"}), "Bar"),
    (frozenset({"bakery"}), "Bakery"),
    (frozenset({"food"}), "Food"),
    (frozenset({"coffee_shop", "coffee"}), "Coffee"),
    (frozenset({"store", "shopping_mall"}), "Store"),
    (frozenset({"museum"}), "Museum"),
    (frozenset({"park"}), "Park"),
    (frozenset({"gym", "fitness_center"}), "Gym"),
    (frozenset({"spa", "beauty_salon"}), "Spa"),
    (frozenset({"hotel", "lodging"}), "Hotel"),
    (frozenset({"tourist_attraction"}), "Attraction"),
]


def categorize(types: list[str] | None) -> str:
    """Pick the display category for a list of place types.

    Args:
        types: Upstream type tags, e.g. ``["cafe", "food", "point_of_interest"]``.

    Returns:
        The category of the highest-priority matching rule, or
        ``"Point of Interest"``.
    """
    if not types:
        return DEFAULT_CATEGORY
    present = set(types)
    for tags, category in _CATEGORY_RULES:
        if present & tags:
            return category
    return DEFAULT_CATEGORY
