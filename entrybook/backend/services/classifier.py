"""
Tag Classification.

Infers an entry's category from its tags and normalizes the tag string.

Each category has a list of match tokens. A category wins when any tag
equals one of its tokens, ignoring case; categories are tried in their
declared order and the first hit is returned. Entries without tags, or
whose tags match nothing, are notes.
"""

from collections.abc import Iterable, Mapping, Sequence

from entrybook.backend.models.entry import Category

TAG_SEPARATOR = ","
TAG_JOINER = ", "

DEFAULT_CATEGORY = Category.NOTE

DEFAULT_MATCH_TOKENS: dict[Category, tuple[str, ...]] = {
    Category.UNCATEGORIZED: (),
    Category.NOTE: ("note", "now"),
    Category.TODO: ("todo", "then"),
    Category.READ_LATER: ("read_later", "later"),
}


def split_tags(text: str | None) -> list[str]:
    """Split a comma-separated tag string into trimmed, non-empty tags."""
    if not text:
        return []
    return [tag.strip() for tag in text.split(TAG_SEPARATOR) if tag.strip()]


def sanitize_tags(text: str | None) -> str:
    """
    Normalize a tag string to ``"a, b, c"`` form.

    Whitespace around each tag is trimmed and empty tags (from repeated,
    leading or trailing commas) are dropped. Applying it twice gives the
    same result as applying it once.
    """
    return TAG_JOINER.join(split_tags(text))


def build_match_tokens(config: Mapping[str, Iterable[str]]) -> dict[Category, tuple[str, ...]]:
    """
    Build a token table from configuration keyed by category label.

    Raises:
        ValueError: If a key is not a category label
    """
    tokens: dict[Category, tuple[str, ...]] = {category: () for category in Category}
    for label, values in config.items():
        try:
            category = Category[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown category in classification tokens: {label!r}") from None
        tokens[category] = tuple(value.lower() for value in values)
    return tokens


def classify(
    tags: Sequence[str],
    tokens: Mapping[Category, Sequence[str]] = DEFAULT_MATCH_TOKENS,
) -> Category:
    """
    Return the category designated by a list of tags.

    Args:
        tags: Individual tags, as produced by split_tags
        tokens: Match tokens per category

    Returns:
        First category in declared order with a matching tag, else NOTE
    """
    if not tags:
        return DEFAULT_CATEGORY

    lowered = {tag.strip().lower() for tag in tags}
    for category in Category:
        if any(token in lowered for token in tokens.get(category, ())):
            return category

    return DEFAULT_CATEGORY
