"""Violation review and continuity note endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from canonkeeper.routers.deps import get_engine
from canonkeeper.schemas import NoteCreate, NoteOut, NoteUpdate, ViolationOut, ViolationStatus, ViolationUpdate
from canonkeeper.services.continuity_engine import ContinuityEngine
from canonkeeper.utils.auth import get_author_id

router = APIRouter()


@router.get("/series/{series_id}/violations", response_model=List[ViolationOut])
async def list_violations(
    series_id: str,
    status: Optional[ViolationStatus] = Query(default=None),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.list_violations(series_id, status)


@router.patch("/violations/{violation_id}", response_model=ViolationOut)
async def review_violation(
    violation_id: str,
    request: ViolationUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    """Acknowledge or resolve a recorded violation. Only authors change violation status."""
    return await engine.update_violation_status(violation_id, request)


# --- Notes ---

@router.post("/series/{series_id}/notes", response_model=NoteOut, status_code=201)
async def create_note(
    series_id: str,
    request: NoteCreate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.create_note(series_id, request, author_id)


@router.get("/series/{series_id}/notes", response_model=List[NoteOut])
async def list_notes(
    series_id: str,
    unresolved_only: bool = Query(default=False, alias="unresolvedOnly"),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.list_notes(series_id, unresolved_only)


@router.patch("/notes/{note_id}", response_model=NoteOut)
async def update_note(
    note_id: str,
    request: NoteUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.update_note(note_id, request)
