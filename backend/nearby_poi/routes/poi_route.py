from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from nearby_poi.core.config import settings
from nearby_poi.core.exceptions import POIError, POINetworkError, POIRateLimitError
from nearby_poi.models.poi_model import POI, Category, POISearchOptions, SearchResult
from nearby_poi.repos.poi_cache_repo import POICacheRepository
from nearby_poi.services.Poi_service import POIService

router = APIRouter(prefix="/pois", tags=["pois"])

# --- Dependency Injection ---
def build_poi_service() -> POIService:
    repo = POICacheRepository(ttl=timedelta(minutes=settings.CACHE_TTL_MINUTES))
    return POIService(repo)

def get_poi_service(request: Request) -> POIService:
    # Built once in the app lifespan so the cache and rate limiter are shared by all requests
    return request.app.state.poi_service

def poi_error_response(error: POIError) -> JSONResponse:
    """Maps POI errors onto HTTP statuses for the exception handler in main."""
    if isinstance(error, POIRateLimitError):
        status_code = 429
    elif isinstance(error, POINetworkError):
        status_code = 503
    else:
        status_code = 502
    return JSONResponse(status_code=status_code, content={"detail": error.message, "code": error.code})

def _parse_categories(raw: Optional[str], service: POIService) -> List[str]:
    if not raw:
        return ["all"]
    ids = [part.strip() for part in raw.split(",") if part.strip()]
    unknown = [cat_id for cat_id in ids if service.get_category_by_id(cat_id) is None]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown categories: {', '.join(unknown)}")
    return ids or ["all"]

@router.get("/nearby", response_model=SearchResult)
async def get_nearby_pois_endpoint(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: int = Query(settings.DEFAULT_RADIUS_METERS, gt=0, le=settings.MAX_RADIUS_METERS),
    categories: Optional[str] = Query(None, description="Comma-separated category ids"),
    limit: int = Query(settings.DEFAULT_LIMIT, ge=1, le=100),
    include_distance: bool = True,
    service: POIService = Depends(get_poi_service),
):
    options = POISearchOptions(
        radius=radius,
        categories=_parse_categories(categories, service),
        limit=limit,
        include_distance=include_distance,
    )
    return await service.get_nearby_pois(lat, lon, options)

@router.get("/search", response_model=List[POI])
async def search_pois_endpoint(
    q: str = Query(..., min_length=1),
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius: int = Query(settings.DEFAULT_SEARCH_RADIUS_METERS, gt=0, le=settings.MAX_RADIUS_METERS),
    service: POIService = Depends(get_poi_service),
):
    return await service.search_pois(q, lat, lon, radius)

@router.get("/categories", response_model=List[Category])
async def list_categories_endpoint(service: POIService = Depends(get_poi_service)):
    return service.get_categories()

@router.get("/categories/{category_id}", response_model=Category)
async def get_category_endpoint(category_id: str, service: POIService = Depends(get_poi_service)):
    category = service.get_category_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Category '{category_id}' not found")
    return category

@router.post("/cache/sweep")
async def sweep_cache_endpoint(service: POIService = Depends(get_poi_service)):
    return {"removed": service.clear_expired_cache()}

@router.delete("/cache")
async def clear_cache_endpoint(service: POIService = Depends(get_poi_service)):
    service.clear_all_cache()
    return {"status": "cleared"}
