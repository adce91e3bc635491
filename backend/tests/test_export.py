"""
Tests for collection export: stats, sorting and the text rendering.
"""

from datetime import date, datetime, timezone

from moodyflicks.schemas import Collection
from moodyflicks.services.export import build_export, collection_stats, render_text, sort_movies

from tests.factories import make_movie


def _collection(**fields):
    stamp = datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc)
    data = {"id": "col_1", "name": "Rainy Sundays", "created_at": stamp, "updated_at": stamp}
    data.update(fields)
    return Collection(**data)


def _movies():
    return [
        make_movie(1, title="zodiac", release_date="2007-03-02", vote_average=7.7),
        make_movie(2, title="Amelie", release_date="2001-04-25", vote_average=7.9),
        make_movie(3, title="Heat", release_date="1995-12-15", vote_average=7.9),
        make_movie(4, title="Untitled Reel", release_date="", vote_average=5.0),
    ]


def test_stats():
    stats = collection_stats(_movies())

    assert stats.total_movies == 4
    assert stats.average_rating == "7.1"
    assert stats.oldest_year == 1995
    assert stats.newest_year == 2007
    assert stats.year_distribution == {1995: 1, 2001: 1, 2007: 1}


def test_stats_for_empty_collection():
    assert collection_stats([]) is None


def test_sort_by_title_ignores_case():
    assert [m.title for m in sort_movies(_movies(), "title")] == ["Amelie", "Heat", "Untitled Reel", "zodiac"]


def test_sort_by_rating_is_stable_for_ties():
    assert [m.id for m in sort_movies(_movies(), "rating")] == [2, 3, 1, 4]


def test_sort_by_date_newest_first_undated_last():
    assert [m.id for m in sort_movies(_movies(), "date")] == [1, 2, 3, 4]


def test_build_export():
    export = build_export(
        _collection(description="Cozy picks"),
        _movies(),
        sort_by="rating",
        today=date(2026, 10, 18),
        poster_url=lambda p: f"https://img.example{p}" if p else None,
    )

    assert export.title == "Rainy Sundays"
    assert export.description == "Cozy picks"
    assert export.last_updated == date(2026, 10, 1)
    assert export.filename == "MoodyFlicks-Rainy Sundays.pdf"
    assert [e.position for e in export.entries] == [1, 2, 3, 4]
    assert export.entries[0].poster_url == "https://img.example/poster2.jpg"
    assert export.stats.total_movies == 4


def test_unknown_sort_falls_back_to_title_and_stats_optional():
    export = build_export(_collection(), _movies(), sort_by="popularity", include_stats=False)

    assert export.sort_by == "title"
    assert export.stats is None
    assert export.description is None


def test_render_text():
    export = build_export(_collection(), _movies()[:2], sort_by="date", today=date(2026, 10, 18))

    text = render_text(export)

    assert text.startswith("Rainy Sundays\nLast updated: 2026-10-01")
    assert "Total Movies: 2" in text
    assert "Year Range: 2001 - 2007" in text
    assert "1. zodiac" in text
    assert "   Rating: 7.9 • Released: 2001" in text
    assert text.endswith("Generated by MoodyFlicks on 2026-10-18")


def test_render_text_for_empty_collection():
    text = render_text(build_export(_collection(), [], today=date(2026, 10, 18)))
    assert "No movies in this collection yet." in text
    assert "Collection Statistics" not in text
