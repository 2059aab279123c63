from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.schemas.search import SearchResults, Suggestion
from app.services.search_service import search_service

router = APIRouter()


@router.get("")
async def search(
    query: Optional[str] = Query(None, description="Course code, department code or free text"),
    db: AsyncSession = Depends(get_db)
):
    """Search departments, courses and professors. An empty query is a 400 (QUERY_REQUIRED)"""
    results = await search_service.search(db, query)
    return {"results": SearchResults.model_validate(results, from_attributes=True)}


@router.get("/suggestions")
async def suggestions(
    query: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Ranked type-ahead suggestions; an empty query returns an empty list"""
    items = await search_service.suggestions(db, query)
    return {"suggestions": [Suggestion(**item) for item in items]}
