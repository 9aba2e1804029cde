from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    image_url: str = ""
    sort_order: int = 0
    is_active: bool = True


class CategoryIn(CategoryBase):
    id: int = Field(..., gt=0)


class CategoryOut(CategoryBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductVariantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    price_modifier: Decimal = Decimal("0.00")
    is_default: bool = False
    is_available: bool = True
    sort_order: int = 0


class ProductVariantIn(ProductVariantBase):
    id: int = Field(..., gt=0)


class ProductVariantOut(ProductVariantBase):
    id: int
    product_id: int

    class Config:
        from_attributes = True


class ProductBase(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    base_price: Decimal = Field(..., ge=0)
    image_url: str = ""
    is_popular: bool = False
    is_available: bool = True
    sort_order: int = 0
    allergens: List[str] = Field(default_factory=list)
    # Opaque structured data supplied by the catalog
    nutritional_info: Dict[str, Any] = Field(default_factory=dict)
    preparation_time: int = Field(0, ge=0)


class ProductOut(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductWithVariants(ProductOut):
    """Product snapshot carried by the storefront and the cart"""
    variants: List[ProductVariantOut] = Field(default_factory=list)
    category: Optional[CategoryOut] = None

    def find_variant(self, variant_id: Optional[int]) -> Optional[ProductVariantOut]:
        if variant_id is None:
            return None
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


class ProductFilter(BaseModel):
    category_id: Optional[int] = None
    available_only: bool = True
    popular_only: bool = False
    search: Optional[str] = None


class ProductIn(ProductBase):
    id: int = Field(..., gt=0)
    variants: List[ProductVariantIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def single_default_variant(self):
        defaults = [v.id for v in self.variants if v.is_default]
        if len(defaults) > 1:
            raise ValueError(
                f"Product {self.id} has more than one default variant: {defaults}"
            )
        return self


class CatalogImport(BaseModel):
    categories: List[CategoryIn] = Field(default_factory=list)
    products: List[ProductIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def products_reference_known_categories(self):
        category_ids = {c.id for c in self.categories}
        if not category_ids:
            return self
        unknown = sorted({p.category_id for p in self.products} - category_ids)
        if unknown:
            raise ValueError(f"Products reference unknown categories: {unknown}")
        return self


class CatalogImportResult(BaseModel):
    categories_created: int = 0
    categories_updated: int = 0
    products_created: int = 0
    products_updated: int = 0
    variants_created: int = 0
    variants_updated: int = 0
