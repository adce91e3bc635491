"""
MoodyFlicks - Collection Export
Builds the printable summary of a collection (stats + sorted movie listing)
and a plain-text rendering of it. Page layout/PDF is left to the client.
"""

from datetime import date
from typing import Callable, Optional, Sequence

from moodyflicks.schemas import CatalogMovie, Collection, CollectionExport, CollectionStats, ExportEntry

SORT_KEYS = ("title", "rating", "date")


def collection_stats(movies: Sequence[CatalogMovie]) -> Optional[CollectionStats]:
    if not movies:
        return None
    average = sum(m.vote_average for m in movies) / len(movies)
    distribution: dict[int, int] = {}
    for movie in movies:
        if movie.release_year is not None:
            distribution[movie.release_year] = distribution.get(movie.release_year, 0) + 1
    years = sorted(distribution)
    return CollectionStats(
        total_movies=len(movies),
        average_rating=f"{average:.1f}",
        oldest_year=years[0] if years else None,
        newest_year=years[-1] if years else None,
        year_distribution=dict(sorted(distribution.items())),
    )


def sort_movies(movies: Sequence[CatalogMovie], sort_by: str = "title") -> list[CatalogMovie]:
    if sort_by == "rating":
        return sorted(movies, key=lambda m: m.vote_average, reverse=True)
    if sort_by == "date":
        # Newest first; undated titles go last
        return sorted(movies, key=lambda m: m.release_date or date.min, reverse=True)
    return sorted(movies, key=lambda m: m.title.casefold())


def build_export(
    collection: Collection,
    movies: Sequence[CatalogMovie],
    sort_by: str = "title",
    include_stats: bool = True,
    today: Optional[date] = None,
    poster_url: Optional[Callable[[Optional[str]], Optional[str]]] = None,
) -> CollectionExport:
    if sort_by not in SORT_KEYS:
        sort_by = "title"
    ordered = sort_movies(movies, sort_by)
    entries = [
        ExportEntry(
            position=i,
            movie_id=m.id,
            title=m.title,
            rating=m.vote_average,
            year=m.release_year,
            poster_url=poster_url(m.poster_path) if poster_url else None,
        )
        for i, m in enumerate(ordered, start=1)
    ]
    return CollectionExport(
        title=collection.name,
        description=collection.description or None,
        last_updated=collection.updated_at.date(),
        generated_on=today or date.today(),
        stats=collection_stats(movies) if include_stats else None,
        sort_by=sort_by,
        entries=entries,
        filename=f"MoodyFlicks-{collection.name}.pdf",
    )


def render_text(export: CollectionExport) -> str:
    lines = [export.title]
    if export.description:
        lines.append(export.description)
    lines.append(f"Last updated: {export.last_updated.isoformat()}")
    lines.append("")

    if export.stats:
        stats = export.stats
        lines.append("Collection Statistics")
        lines.append(f"Total Movies: {stats.total_movies}")
        lines.append(f"Average Rating: {stats.average_rating}")
        if stats.oldest_year is not None:
            lines.append(f"Year Range: {stats.oldest_year} - {stats.newest_year}")
        lines.append("")

    if export.entries:
        for entry in export.entries:
            year = entry.year if entry.year is not None else "n/a"
            lines.append(f"{entry.position}. {entry.title}")
            lines.append(f"   Rating: {entry.rating:.1f} • Released: {year}")
    else:
        lines.append("No movies in this collection yet.")

    lines.append("")
    lines.append(f"Generated by MoodyFlicks on {export.generated_on.isoformat()}")
    return "\n".join(lines)
