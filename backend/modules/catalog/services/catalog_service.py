# backend/modules/catalog/services/catalog_service.py

"""
Read access to the restaurant catalog plus catalog ingestion.

Reads never fail the storefront: when the catalog store is unreachable the
service logs the problem and serves the fallback catalog (or nothing, when
the fallback is disabled).
"""

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import or_, func
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Dict, Callable, TypeVar
import logging

from core.config import settings
from core.error_handling import APIValidationError, PersistenceError
from ..models.catalog_models import Category, Product, ProductVariant
from ..schemas.catalog_schemas import (
    CategoryOut, ProductOut, ProductVariantOut, ProductWithVariants,
    ProductFilter, CatalogImport, CatalogImportResult
)
from ..data.fallback_catalog import (
    FALLBACK_CATEGORIES, FALLBACK_PRODUCTS, FALLBACK_VARIANTS
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogService:
    """Service exposing categories, products and variants"""

    def __init__(self, db: Session, fallback_enabled: Optional[bool] = None):
        self.db = db
        if fallback_enabled is None:
            fallback_enabled = settings.catalog_fallback_enabled
        self.fallback_enabled = fallback_enabled

    # ========== Reads ==========

    def list_categories(self, active_only: bool = True) -> List[CategoryOut]:
        def query():
            q = self.db.query(Category)
            if active_only:
                q = q.filter(Category.is_active.is_(True))
            rows = q.order_by(Category.sort_order, Category.id).all()
            return [CategoryOut.model_validate(row) for row in rows]

        def fallback():
            categories = [CategoryOut(**data) for data in FALLBACK_CATEGORIES]
            if active_only:
                categories = [c for c in categories if c.is_active]
            return sorted(categories, key=lambda c: (c.sort_order, c.id))

        return self._read("categories", query, fallback)

    def list_products(self, filters: Optional[ProductFilter] = None) -> List[ProductOut]:
        filters = filters or ProductFilter()

        def query():
            rows = self._product_query(filters).all()
            return [ProductOut.model_validate(row) for row in rows]

        def fallback():
            return [
                ProductOut(**p.model_dump(exclude={"variants", "category"}))
                for p in self._fallback_products(filters)
            ]

        return self._read("products", query, fallback)

    def list_products_with_variants(
        self, filters: Optional[ProductFilter] = None
    ) -> List[ProductWithVariants]:
        filters = filters or ProductFilter()

        def query():
            rows = (
                self._product_query(filters)
                .options(selectinload(Product.variants), selectinload(Product.category))
                .all()
            )
            return [ProductWithVariants.model_validate(row) for row in rows]

        return self._read(
            "products", query, lambda: self._fallback_products(filters)
        )

    def list_variants(
        self, product_id: Optional[int] = None, available_only: bool = False
    ) -> List[ProductVariantOut]:
        def query():
            q = self.db.query(ProductVariant)
            if product_id is not None:
                q = q.filter(ProductVariant.product_id == product_id)
            if available_only:
                q = q.filter(ProductVariant.is_available.is_(True))
            rows = q.order_by(
                ProductVariant.product_id, ProductVariant.sort_order, ProductVariant.id
            ).all()
            return [ProductVariantOut.model_validate(row) for row in rows]

        def fallback():
            variants = [ProductVariantOut(**data) for data in FALLBACK_VARIANTS]
            if product_id is not None:
                variants = [v for v in variants if v.product_id == product_id]
            if available_only:
                variants = [v for v in variants if v.is_available]
            return sorted(variants, key=lambda v: (v.product_id, v.sort_order, v.id))

        return self._read("variants", query, fallback)

    def get_product(self, product_id: int) -> Optional[ProductWithVariants]:
        """Product with its variants and category, or None when unknown"""

        def query():
            row = (
                self.db.query(Product)
                .options(selectinload(Product.variants), selectinload(Product.category))
                .filter(Product.id == product_id)
                .first()
            )
            return ProductWithVariants.model_validate(row) if row else None

        def fallback():
            for product in self._fallback_products(ProductFilter(available_only=False)):
                if product.id == product_id:
                    return product
            return None

        try:
            return query()
        except SQLAlchemyError as e:
            self._log_read_failure("product", e)
            return fallback() if self.fallback_enabled else None

    def search_products(self, query_text: str) -> List[ProductWithVariants]:
        """Case-insensitive match on product name or description"""
        term = (query_text or "").strip()
        if not term:
            return []
        return self.list_products_with_variants(
            ProductFilter(available_only=False, search=term)
        )

    # ========== Ingestion ==========

    def import_catalog(self, payload: CatalogImport) -> CatalogImportResult:
        """
        Upsert categories, products and variants from a validated payload.

        The payload schema already rejects products with several default
        variants; the check is repeated against the stored rows so variants
        not present in the payload are taken into account.
        """
        result = CatalogImportResult()

        try:
            for data in payload.categories:
                category = self.db.get(Category, data.id)
                if category is None:
                    self.db.add(Category(**data.model_dump()))
                    result.categories_created += 1
                else:
                    self._assign(category, data.model_dump(exclude={"id"}))
                    result.categories_updated += 1
            self.db.flush()

            for data in payload.products:
                if self.db.get(Category, data.category_id) is None:
                    raise APIValidationError(
                        "Product references an unknown category",
                        {"product_id": data.id, "category_id": data.category_id},
                    )

                fields = data.model_dump(exclude={"id", "variants"})
                product = self.db.get(Product, data.id)
                if product is None:
                    self.db.add(Product(id=data.id, **fields))
                    result.products_created += 1
                else:
                    self._assign(product, fields)
                    result.products_updated += 1
                self.db.flush()

                for variant_data in data.variants:
                    variant = self.db.get(ProductVariant, variant_data.id)
                    if variant is None:
                        self.db.add(ProductVariant(product_id=data.id, **variant_data.model_dump()))
                        result.variants_created += 1
                    elif variant.product_id != data.id:
                        raise APIValidationError(
                            "Variant belongs to another product",
                            {"variant_id": variant.id, "product_id": variant.product_id},
                        )
                    else:
                        self._assign(variant, variant_data.model_dump(exclude={"id"}))
                        result.variants_updated += 1
                self.db.flush()

            self._check_default_variants([p.id for p in payload.products])
            self.db.commit()

        except APIValidationError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Catalog import failed: {str(e)}")
            raise PersistenceError("Catalog import failed", step="import_catalog")

        logger.info(f"Catalog import finished: {result.model_dump()}")
        return result

    # ========== Helpers ==========

    def _product_query(self, filters: ProductFilter):
        q = self.db.query(Product)
        if filters.category_id is not None:
            q = q.filter(Product.category_id == filters.category_id)
        if filters.available_only:
            q = q.filter(Product.is_available.is_(True))
        if filters.popular_only:
            q = q.filter(Product.is_popular.is_(True))
        if filters.search:
            pattern = f"%{filters.search.strip().lower()}%"
            q = q.filter(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(Product.description).like(pattern),
                )
            )
        return q.order_by(Product.sort_order, Product.id)

    def _fallback_products(self, filters: ProductFilter) -> List[ProductWithVariants]:
        categories = {c["id"]: c for c in FALLBACK_CATEGORIES}
        variants: Dict[int, List[dict]] = {}
        for variant in FALLBACK_VARIANTS:
            variants.setdefault(variant["product_id"], []).append(variant)

        products = []
        for data in FALLBACK_PRODUCTS:
            product = ProductWithVariants(
                **data,
                variants=variants.get(data["id"], []),
                category=categories.get(data["category_id"]),
            )
            if filters.category_id is not None and product.category_id != filters.category_id:
                continue
            if filters.available_only and not product.is_available:
                continue
            if filters.popular_only and not product.is_popular:
                continue
            if filters.search:
                term = filters.search.strip().lower()
                if term not in product.name.lower() and term not in product.description.lower():
                    continue
            products.append(product)

        return sorted(products, key=lambda p: (p.sort_order, p.id))

    def _check_default_variants(self, product_ids: List[int]) -> None:
        if not product_ids:
            return
        offenders = (
            self.db.query(ProductVariant.product_id)
            .filter(
                ProductVariant.product_id.in_(product_ids),
                ProductVariant.is_default.is_(True),
            )
            .group_by(ProductVariant.product_id)
            .having(func.count(ProductVariant.id) > 1)
            .all()
        )
        if offenders:
            raise APIValidationError(
                "Products may have at most one default variant",
                {"product_ids": sorted(row[0] for row in offenders)},
            )

    def _read(self, what: str, query: Callable[[], List[T]],
              fallback: Callable[[], List[T]]) -> List[T]:
        try:
            return query()
        except SQLAlchemyError as e:
            self._log_read_failure(what, e)
            return fallback() if self.fallback_enabled else []

    def _log_read_failure(self, what: str, error: Exception) -> None:
        logger.warning(
            f"Could not load {what} from the catalog store, "
            f"serving {'fallback' if self.fallback_enabled else 'empty'} data: {error}"
        )
        self.db.rollback()

    @staticmethod
    def _assign(row, values: dict) -> None:
        for field, value in values.items():
            setattr(row, field, value)
