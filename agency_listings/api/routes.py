# agency_listings/api/routes.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from .. import crud, schemas
from ..catalog import find_city, find_service
from ..db import get_collection, get_db
from ..errors import BulkLookupFailed, RankConflict
from ..resolver import SourcePreference, SourceResolver
from ..selector import CandidateSelector
from ..utils import logger

router = APIRouter()


def get_resolver(request: Request, db: Session = Depends(get_db)) -> SourceResolver:
    settings = request.app.state.settings
    selector = CandidateSelector(
        get_collection(request),
        sponsor_token=settings.sponsor.brand_token,
        max_candidates=max(0, settings.page_size - 1),
    )
    return SourceResolver(db, selector, settings.sponsor)


def _city_name(city_slug: str, city_name: Optional[str]) -> Optional[str]:
    if city_name:
        return city_name
    city = find_city(city_slug)
    return city.name if city else None


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/page-listings", response_model=schemas.ListingsResponse)
def page_listings(
    service: str = Query(""),
    city: str = Query(""),
    city_name: Optional[str] = Query(None, alias="cityName"),
    source: SourcePreference = Query("auto"),
    resolver: SourceResolver = Depends(get_resolver),
):
    if not service or not city:
        raise HTTPException(status_code=400, detail="Missing service or city")

    catalog_service = find_service(service)
    if catalog_service is None:
        # curated rows may still exist for a retired service slug
        if source != "bulk":
            resolved = resolver.resolve(service, city, service, _city_name(city, city_name), source="curated")
            if resolved.listings:
                return {"data": resolved.listings, "source": resolved.source}
        return {"data": [], "source": "bulk"}

    try:
        resolved = resolver.resolve(service, city, catalog_service.name, _city_name(city, city_name), source=source)
    except BulkLookupFailed as e:
        logger.exception("Bulk listings failed for %s/%s: %s", service, city, e)
        return JSONResponse(
            status_code=503,
            content={"data": [], "source": "bulk", "error": "Agency store unavailable"},
        )
    return {"data": resolved.listings, "source": resolved.source}


@router.get("/page-listings/admin", response_model=List[schemas.PageListingOut])
def admin_page_listings(service: str, city: str, db: Session = Depends(get_db)):
    return crud.list_page_listings(db, service, city)


@router.post("/page-listings/import", response_model=List[schemas.PageListingOut])
def import_page_listings(
    payload: schemas.ImportRequest,
    db: Session = Depends(get_db),
    resolver: SourceResolver = Depends(get_resolver),
):
    catalog_service = find_service(payload.service_slug)
    if catalog_service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    try:
        resolved = resolver.resolve(
            payload.service_slug,
            payload.city_slug,
            catalog_service.name,
            _city_name(payload.city_slug, payload.city_name),
            source="bulk",
        )
        return crud.import_listings(db, payload.service_slug, payload.city_slug, resolved.listings)
    except RankConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except BulkLookupFailed as e:
        logger.exception("Import failed for %s/%s: %s", payload.service_slug, payload.city_slug, e)
        raise HTTPException(status_code=503, detail="Agency store unavailable")


@router.get("/page-listings/{listing_id}", response_model=schemas.PageListingOut)
def get_page_listing(listing_id: int, db: Session = Depends(get_db)):
    obj = crud.get_listing(db, listing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.post("/page-listings", response_model=schemas.PageListingOut, status_code=201)
def create_page_listing(payload: schemas.PageListingCreate, db: Session = Depends(get_db)):
    try:
        return crud.create_listing(db, payload.model_dump())
    except RankConflict as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/page-listings/{listing_id}", response_model=schemas.PageListingOut)
def update_page_listing(listing_id: int, payload: schemas.PageListingUpdate, db: Session = Depends(get_db)):
    try:
        obj = crud.update_listing(db, listing_id, updates=payload.model_dump(exclude_unset=True))
    except RankConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.delete("/page-listings/{listing_id}")
def delete_page_listing(listing_id: int, db: Session = Depends(get_db)):
    ok = crud.delete_listing(db, listing_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Listing not found")
    return {"status": "deleted"}
