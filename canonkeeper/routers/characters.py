"""Character and world element endpoints. Every write goes through the continuity checker."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from canonkeeper.routers.deps import get_engine
from canonkeeper.schemas import (
    CharacterCreate,
    CharacterOut,
    CharacterUpdate,
    CharacterWriteResult,
    WorldElementCreate,
    WorldElementOut,
    WorldElementUpdate,
    WorldElementWriteResult,
)
from canonkeeper.services.continuity_engine import ContinuityEngine
from canonkeeper.utils.auth import get_author_id

router = APIRouter()


@router.post("/characters", response_model=CharacterWriteResult, status_code=201)
async def create_character(
    request: CharacterCreate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.create_character(request, author_id)


@router.get("/characters", response_model=List[CharacterOut])
async def list_characters(series_id: str = Query(alias="seriesId"), engine: ContinuityEngine = Depends(get_engine)):
    return await engine.get_series_characters(series_id)


@router.get("/characters/{character_id}", response_model=CharacterOut)
async def get_character(character_id: str, engine: ContinuityEngine = Depends(get_engine)):
    return await engine.get_character(character_id)


@router.patch("/characters/{character_id}", response_model=CharacterWriteResult)
async def update_character(
    character_id: str,
    request: CharacterUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.update_character(character_id, request)


# --- World elements ---

@router.post("/world-elements", response_model=WorldElementWriteResult, status_code=201)
async def create_world_element(
    request: WorldElementCreate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.create_world_element(request, author_id)


@router.get("/world-elements", response_model=List[WorldElementOut])
async def list_world_elements(series_id: str = Query(alias="seriesId"), engine: ContinuityEngine = Depends(get_engine)):
    return await engine.get_series_world_elements(series_id)


@router.patch("/world-elements/{element_id}", response_model=WorldElementWriteResult)
async def update_world_element(
    element_id: str,
    request: WorldElementUpdate,
    author_id: str = Depends(get_author_id),
    engine: ContinuityEngine = Depends(get_engine),
):
    return await engine.update_world_element(element_id, request)
