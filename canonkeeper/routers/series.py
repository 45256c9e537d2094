"""Series CRUD and book endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from canonkeeper.routers.deps import get_engine
from canonkeeper.schemas import (
    BookCreate,
    BookOut,
    BookUpdate,
    BookWriteResult,
    SeriesCreate,
    SeriesOut,
    SeriesOverview,
    SeriesSummary,
    SeriesUpdate,
)
from canonkeeper.services.continuity_engine import ContinuityEngine
from canonkeeper.utils.auth import get_author_id

router = APIRouter()


@router.post("/series", response_model=SeriesOut, status_code=201)
async def create_series(
    request: SeriesCreate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.create_series(request, author_id)


@router.get("/series", response_model=List[SeriesSummary])
async def list_series(author_id: str = Query(alias="authorId"), engine: ContinuityEngine = Depends(get_engine)):
    return await engine.list_author_series(author_id)


@router.get("/series/{series_id}", response_model=SeriesOverview)
async def get_series(series_id: str, engine: ContinuityEngine = Depends(get_engine)):
    """Series plus its overview: books, counts, open notes and pending violations."""
    return await engine.get_series(series_id)


@router.patch("/series/{series_id}", response_model=SeriesOut)
async def update_series(
    series_id: str,
    request: SeriesUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.update_series(series_id, request)


@router.delete("/series/{series_id}", status_code=204)
async def delete_series(
    series_id: str,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    """Delete a series and everything authored inside it."""
    await engine.delete_series(series_id)
    return Response(status_code=204)


# --- Books ---

@router.post("/series/{series_id}/books", response_model=BookWriteResult, status_code=201)
async def create_book(
    series_id: str,
    request: BookCreate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.create_book(series_id, request, author_id)


@router.get("/series/{series_id}/books", response_model=List[BookOut])
async def list_books(series_id: str, engine: ContinuityEngine = Depends(get_engine)):
    return await engine.get_series_books(series_id)


@router.patch("/books/{book_id}", response_model=BookWriteResult)
async def update_book(
    book_id: str,
    request: BookUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.update_book(book_id, request)
