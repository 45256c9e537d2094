"""Series Aggregator: read-only health summary of a series. Never mutates state."""

from __future__ import annotations

from canonkeeper.schemas import BookOut, NoteOut, SeriesOut, SeriesOverview, SeriesSummary
from canonkeeper.services.entity_store import EntityStore


async def overview(store: EntityStore, series_id: str) -> SeriesOverview:
    """Full overview of one series.

    Raises NotFound when the series does not exist rather than returning a
    partially populated overview.
    """
    series = await store.get_series(series_id)
    books = await store.list_books(series_id)
    notes = await store.list_notes(series_id, unresolved_only=True)

    return SeriesOverview(
        series=SeriesOut.model_validate(series),
        books=[BookOut.model_validate(b) for b in books],
        character_count=await store.count_characters(series_id),
        world_element_count=await store.count_world_elements(series_id),
        active_arc_count=await store.count_active_arcs(series_id),
        total_word_count=sum(b.current_word_count or 0 for b in books),
        continuity_notes=[NoteOut.model_validate(n) for n in notes],
        pending_violations=await store.count_pending_violations(series_id),
    )


async def summary(store: EntityStore, series_id: str) -> SeriesSummary:
    """Counts-only overview used for an author's series list."""
    series = await store.get_series(series_id)
    base = SeriesOut.model_validate(series).model_dump()
    return SeriesSummary(
        **base,
        book_count=len(await store.list_books(series_id)),
        character_count=await store.count_characters(series_id),
        world_element_count=await store.count_world_elements(series_id),
        total_word_count=await store.total_word_count(series_id),
        pending_violations=await store.count_pending_violations(series_id),
    )
