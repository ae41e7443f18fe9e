from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ...dependencies import get_taxonomy_service
from ....news.schemas.responses import FilterOptions, TaxonomyCount
from ....news.services.taxonomy_service import TaxonomyService

router = APIRouter()


@router.get("/filter-options", response_model=FilterOptions)
async def get_filter_options(
    q: Optional[str] = Query(None, description="Name search applied to every list"),
    taxonomy: TaxonomyService = Depends(get_taxonomy_service)
):
    return taxonomy.get_filter_options(q)


@router.get("/categories", response_model=Dict[str, List[TaxonomyCount]])
async def get_categories(
    q: Optional[str] = Query(None),
    taxonomy: TaxonomyService = Depends(get_taxonomy_service)
):
    return {"categories": taxonomy.get_categories(q)}


@router.get("/sources", response_model=Dict[str, List[TaxonomyCount]])
async def get_sources(
    q: Optional[str] = Query(None),
    taxonomy: TaxonomyService = Depends(get_taxonomy_service)
):
    return {"sources": taxonomy.get_sources(q)}


@router.get("/authors", response_model=Dict[str, List[TaxonomyCount]])
async def get_authors(
    q: Optional[str] = Query(None),
    taxonomy: TaxonomyService = Depends(get_taxonomy_service)
):
    return {"authors": taxonomy.get_authors(q)}
