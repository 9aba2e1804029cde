# backend/modules/catalog/routes/catalog_routes.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.database import get_db
from core.error_handling import handle_api_errors, NotFoundError
from ..services.catalog_service import CatalogService
from ..schemas.catalog_schemas import (
    CategoryOut, ProductWithVariants, ProductVariantOut, ProductFilter,
    CatalogImport, CatalogImportResult
)

router = APIRouter(prefix="/api/v1/catalog", tags=["Catalog"])


@router.get("/categories", response_model=List[CategoryOut])
@handle_api_errors
async def get_categories(
    include_inactive: bool = Query(False, description="Include inactive categories"),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_categories(active_only=not include_inactive)


@router.get("/products", response_model=List[ProductWithVariants])
@handle_api_errors
async def get_products(
    category_id: Optional[int] = Query(None, description="Filter by category ID"),
    include_unavailable: bool = Query(False, description="Include unavailable products"),
    popular_only: bool = Query(False, description="Only popular products"),
    db: Session = Depends(get_db),
):
    """
    List products with their variants, ordered by sort order.

    - **category_id**: Restrict to one category
    - **include_unavailable**: Also return products flagged unavailable
    - **popular_only**: Only products flagged popular
    """
    filters = ProductFilter(
        category_id=category_id,
        available_only=not include_unavailable,
        popular_only=popular_only,
    )
    return CatalogService(db).list_products_with_variants(filters)


@router.get("/products/search", response_model=List[ProductWithVariants])
@handle_api_errors
async def search_products(
    q: str = Query(..., min_length=1, description="Text to look for"),
    db: Session = Depends(get_db),
):
    return CatalogService(db).search_products(q)


@router.get("/products/{product_id}", response_model=ProductWithVariants)
@handle_api_errors
async def get_product(product_id: int, db: Session = Depends(get_db)):
    product = CatalogService(db).get_product(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


@router.get("/variants", response_model=List[ProductVariantOut])
@handle_api_errors
async def get_variants(
    product_id: Optional[int] = Query(None, description="Filter by product ID"),
    available_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_variants(product_id, available_only)


@router.post("/import", response_model=CatalogImportResult)
@handle_api_errors
async def import_catalog(payload: CatalogImport, db: Session = Depends(get_db)):
    """Upsert catalog rows supplied by the catalog provider."""
    return CatalogService(db).import_catalog(payload)
