"""Title aliases, URL slugs and relation lookups.

Pure transformation logic: no I/O, no framework dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable

from aniresolve.domain.entities.anime import AliasList, MediaItem, Relation

SEQUEL_KIND = "sequel"


def aliases_from_titles(titles: Iterable[str | None]) -> AliasList:
    """Ordered, de-duplicated alias list from raw title strings.

    Drops None/blank entries and case-insensitive duplicates, keeping the
    first occurrence with its original casing.
    """
    seen: set[str] = set()
    out: list[str] = []
    for title in titles:
        if not title or not title.strip():
            continue
        key = title.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(title)
    return tuple(out)


def aliases(item: MediaItem) -> AliasList:
    """Candidate titles for *item*: primary, english, native, synonyms."""
    return aliases_from_titles(
        (item.title, item.title_english, item.title_japanese, *item.title_synonyms)
    )


def slugify(title: str) -> str:
    """Lower-case *title* and join its whitespace-separated words with ``-``.

    Punctuation is kept as-is, so titles like "Re:Zero" or "Steins;Gate"
    may not match the folder names some mirrors use.
    """
    return "-".join(word.lower() for word in title.split())


def pad_episode(number: int) -> str:
    """Zero-pad an episode ordinal to two digits (``5`` -> ``"05"``)."""
    if number < 1:
        raise ValueError(f"episode ordinal must be >= 1, got {number}")
    return f"{number:02d}"


def next_season(item: MediaItem) -> Relation | None:
    """First relation tagged as a sequel, or None."""
    for relation in item.relations:
        if relation.kind.strip().lower() == SEQUEL_KIND:
            return relation
    return None


def find_sequel(item: MediaItem) -> int | None:
    """Identifier of the immediate sequel, or None."""
    relation = next_season(item)
    return relation.target_id if relation is not None else None
