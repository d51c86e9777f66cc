from pipelinetheatre.enrich.genre_style import (
    GenreStyleHints,
    enrich_genre_style,
    group_shows,
    guess_genre,
    guess_style,
)
from pipelinetheatre.pipeline.store import MemoryStore


def _row(fingerprint, source_url, **fields):
    row = {
        "fingerprint": fingerprint,
        "source_url": source_url,
        "date": "2026-05-01",
        "titre": "Sans titre",
        "theatre_nom": "Théâtre X",
        "genre": None,
        "style": None,
    }
    row.update(fields)
    return row


def test_guess_genre():
    assert guess_genre("Une comédie déjantée", None) == "comedie"
    assert guess_genre("Hamlet", "Une tragédie de la vengeance") == "drame"
    assert guess_genre("Farce tragique", None) == "autre"
    assert guess_genre("Hamlet", None) is None


def test_guess_style():
    assert guess_style("Le Misanthrope", "d'après Molière") == "classique"
    assert guess_style("Nous", "Une création documentaire") == "contemporain"
    assert guess_style("Nous", None) == "contemporain"


def test_hints_are_injectable():
    hints = GenreStyleHints(comedy=["clown"], drama=[], classic_authors=["brecht"], contemporary=[])
    assert guess_genre("Le clown", None, hints) == "comedie"
    assert guess_style("Mère Courage", "de Bertolt Brecht", hints) == "classique"


def test_group_shows_merges_rows_by_source_url():
    rows = [
        _row("a", "https://x.be/hamlet", titre="", description=None),
        _row("b", "https://x.be/hamlet", titre="Hamlet", description="Shakespeare", genre="drame"),
        _row("c", None),
    ]
    shows = group_shows(rows)
    assert len(shows) == 1
    assert shows[0]["titre"] == "Hamlet"
    assert shows[0]["has_genre"] is True
    assert shows[0]["has_style"] is False


def test_enrich_does_not_overwrite_existing_genre():
    store = MemoryStore([
        _row("a", "https://x.be/rire", titre="Une comédie hilarante", genre="drame"),
        _row("b", "https://x.be/rire", titre="Une comédie hilarante"),
    ])

    summary = enrich_genre_style(store, log_func=lambda *_: None)

    rows = {r["fingerprint"]: r for r in store.select()}
    assert rows["a"]["genre"] == "drame"
    assert rows["b"]["genre"] is None
    assert rows["a"]["style"] == "contemporain"
    assert rows["b"]["style"] == "contemporain"
    assert summary["genre_set"] == 0
    assert summary["style_set"] == 1
    assert summary["rows_patched"] == 2


def test_enrich_tags_per_show_and_is_idempotent():
    store = MemoryStore([
        _row("a", "https://x.be/tartuffe", titre="Tartuffe", description="La comédie de Molière"),
        _row("b", "https://x.be/tartuffe", titre="Tartuffe", date="2026-05-02"),
        _row("c", "https://x.be/nous", titre="Nous", style="contemporain"),
    ])

    first = enrich_genre_style(store, log_func=lambda *_: None)
    rows = {r["fingerprint"]: r for r in store.select()}
    assert rows["a"]["genre"] == rows["b"]["genre"] == "comedie"
    assert rows["a"]["style"] == rows["b"]["style"] == "classique"
    assert rows["c"]["genre"] is None
    assert first["candidate_shows"] == 2
    assert first["updated_shows"] == 1

    before = store.select()
    second = enrich_genre_style(store, log_func=lambda *_: None)
    assert store.select() == before
    assert second["updated_shows"] == 0


def test_enrich_dry_run_writes_nothing():
    store = MemoryStore([_row("a", "https://x.be/rire", titre="Une farce")])
    summary = enrich_genre_style(store, dry_run=True, log_func=lambda *_: None)
    assert summary["updated_shows"] == 1
    assert summary["rows_patched"] == 0
    assert store.select()[0]["genre"] is None
