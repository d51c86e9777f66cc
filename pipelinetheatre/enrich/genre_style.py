"""
Genre / style backfill for stored representations.

Works per show (all rows sharing a source_url) so each production is
tagged once, and only fills fields that are still null: values set by a
human editor are never overwritten.
"""

from dataclasses import dataclass, field

from pipelinetheatre.utils.text import strip_diacritics

COMEDY_HINTS = [
    "comedie", "humour", "drole", "satire", "farce", "burlesque", "cabaret",
    "stand-up", "one man show", "seul en scene", "seule en scene",
]

DRAMA_HINTS = [
    "drame", "tragique", "tragedie", "thriller", "noir", "guerre",
    "violence", "suicide", "meurtre", "deuil",
]

# Canon authors: a mention usually means a classic repertoire piece
CLASSIC_AUTHORS = [
    "moliere", "shakespeare", "racine", "corneille", "tchekhov", "chekhov",
    "sophocle", "euripide", "eschyle", "goldoni", "ibsen", "strindberg",
    "dostoievski", "dostoievsky", "dostoevski", "ovide",
]

CONTEMPORARY_HINTS = [
    "creation", "contemporain", "contemporaine", "aujourd", "performance",
    "documentaire", "autofiction", "slam",
]


def _norm(text):
    return strip_diacritics(text).lower()


@dataclass
class GenreStyleHints:
    comedy: list = field(default_factory=lambda: list(COMEDY_HINTS))
    drama: list = field(default_factory=lambda: list(DRAMA_HINTS))
    classic_authors: list = field(default_factory=lambda: list(CLASSIC_AUTHORS))
    contemporary: list = field(default_factory=lambda: list(CONTEMPORARY_HINTS))


DEFAULT_HINTS = GenreStyleHints()


def _mentions(blob, words):
    return any(_norm(w) in blob for w in words)


def guess_genre(title, description, hints=None):
    """
    comedie / drame from hint words, autre when both fire.
    None when nothing fires, rather than tagging everything "autre".
    """
    hints = hints or DEFAULT_HINTS
    blob = f"{_norm(title)} {_norm(description)}"

    has_comedy = _mentions(blob, hints.comedy)
    has_drama = _mentions(blob, hints.drama)

    if has_comedy and not has_drama:
        return "comedie"
    if has_drama and not has_comedy:
        return "drame"
    if has_comedy and has_drama:
        return "autre"
    return None


def guess_style(title, description, hints=None):
    """classique when a canon author is named, otherwise contemporain."""
    hints = hints or DEFAULT_HINTS
    blob = f"{_norm(title)} {_norm(description)}"

    if _mentions(blob, hints.classic_authors):
        return "classique"
    if _mentions(blob, hints.contemporary):
        return "contemporain"
    # Default when nothing fires
    return "contemporain"


def group_shows(rows):
    """
    Group rows by source_url. Each show keeps its first non-empty title and
    description, and whether any of its rows already has a genre / style.
    Rows without a source_url are not part of any show.
    """
    shows = {}
    for row in rows:
        key = row.get("source_url") or ""
        if not key:
            continue

        show = shows.get(key)
        if show is None:
            shows[key] = {
                "source_url": key,
                "titre": row.get("titre"),
                "description": row.get("description"),
                "has_genre": row.get("genre") is not None,
                "has_style": row.get("style") is not None,
            }
            continue

        show["has_genre"] = show["has_genre"] or row.get("genre") is not None
        show["has_style"] = show["has_style"] or row.get("style") is not None
        if not show["titre"] and row.get("titre"):
            show["titre"] = row["titre"]
        if not show["description"] and row.get("description"):
            show["description"] = row["description"]

    return list(shows.values())


def enrich_genre_style(store, dry_run=False, limit=None, hints=None, log_func=None):
    """
    Backfill genre and style on stored representations, one show at a time.

    A field is inferred only for shows where every row lacks it, and written
    only to rows where it is still null. Safe to re-run.
    Returns a summary dict.
    """
    log = log_func or print
    rows = store.select(include_hidden=True)

    shows = [s for s in group_shows(rows) if not (s["has_genre"] and s["has_style"])]
    if limit:
        shows = shows[:limit]

    updated_shows = 0
    genre_set = 0
    style_set = 0
    rows_patched = 0

    for show in shows:
        patch = {}
        if not show["has_genre"]:
            genre = guess_genre(show["titre"], show["description"], hints)
            if genre:
                patch["genre"] = genre
        if not show["has_style"]:
            style = guess_style(show["titre"], show["description"], hints)
            if style:
                patch["style"] = style

        if not patch:
            continue

        updated_shows += 1
        genre_set += "genre" in patch
        style_set += "style" in patch

        if dry_run:
            continue

        for field_name, value in patch.items():
            rows_patched += store.update(
                {"source_url": show["source_url"], field_name: None},
                {field_name: value},
            )

    log(f"  Genre/style: {updated_shows} of {len(shows)} candidate shows tagged"
        f"{' (dry run)' if dry_run else ''}")

    return {
        "dry_run": dry_run,
        "candidate_shows": len(shows),
        "updated_shows": updated_shows,
        "genre_set": genre_set,
        "style_set": style_set,
        "rows_patched": rows_patched,
    }
