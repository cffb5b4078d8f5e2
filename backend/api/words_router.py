"""API routes for browsing and searching the vocabulary."""

import logging

from fastapi import APIRouter, HTTPException, Query

from backend.api.schemas import WordResponse
from backend.vocab.matching import VocabularyFilter
from backend.vocab.service import get_vocabulary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/words", tags=["words"])


@router.get("", response_model=list[WordResponse])
async def list_words(
    declension: list[str] = Query(default=[]),
    gender: list[str] = Query(default=[]),
    q: str = "",
) -> list[WordResponse]:
    """List words matching the filter criteria, in collection order."""
    criteria = VocabularyFilter.build(declension, gender, q)
    return [WordResponse.from_word(w) for w in get_vocabulary().filter(criteria)]


@router.get("/search", response_model=list[WordResponse])
async def search_words(q: str = "", limit: int = Query(default=20, ge=1, le=200)) -> list[WordResponse]:
    """Search words by relevance. A blank query returns nothing."""
    return [WordResponse.from_word(w) for w in get_vocabulary().search(q)[:limit]]


@router.get("/{word_id}", response_model=WordResponse)
async def get_word(word_id: str) -> WordResponse:
    word = get_vocabulary().get_by_id(word_id)
    if word is None:
        raise HTTPException(status_code=404, detail="Word not found")
    return WordResponse.from_word(word)
