"""
Tag list normalisation.

Profile tag fields (expertise, services, ...) are ordered lists of strings.
Clients may still submit the legacy comma-joined form ("Oncology, Immunology"),
so everything entering the domain goes through parse_tags.
"""

from collections.abc import Iterable

SEPARATOR = ","


def parse_tags(value: str | Iterable[str] | None) -> list[str]:
    """
    Split, trim and dedupe tags.

    Accepts a comma-joined string or an iterable of strings (each item may
    itself be comma-joined). Empty entries are dropped; duplicates are removed
    keeping the first occurrence, so order is stable.
    """
    if value is None:
        return []

    raw: list[str] = []
    if isinstance(value, str):
        raw = value.split(SEPARATOR)
    else:
        for item in value:
            raw.extend(str(item).split(SEPARATOR))

    tags: list[str] = []
    seen: set[str] = set()
    for part in raw:
        tag = part.strip()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags


def join_tags(tags: Iterable[str]) -> str:
    """Render tags in the comma-joined display form."""
    return f"{SEPARATOR} ".join(parse_tags(list(tags)))


def add_tag(tags: list[str], tag: str) -> list[str]:
    """Return a new list with tag appended unless blank or already present."""
    return parse_tags([*tags, tag])


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [t for t in tags if t != tag.strip()]
