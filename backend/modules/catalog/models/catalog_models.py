# backend/modules/catalog/models/catalog_models.py

from sqlalchemy import (Column, Integer, String, ForeignKey, Numeric, Text,
                        Boolean, JSON, Index)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """Menu categories shown on the storefront"""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=False, default="")
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    products = relationship("Product", back_populates="category",
                            order_by="Product.sort_order")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class Product(Base, TimestampMixin):
    """Purchasable product with a base price"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"),
                         nullable=False, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    base_price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=False, default="")
    is_popular = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    allergens = Column(JSON, nullable=False, default=list)
    nutritional_info = Column(JSON, nullable=False, default=dict)
    preparation_time = Column(Integer, nullable=False, default=0)  # minutes

    category = relationship("Category", back_populates="products")
    variants = relationship("ProductVariant", back_populates="product",
                            order_by="ProductVariant.sort_order",
                            cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_products_category_sort", "category_id", "sort_order"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', base_price={self.base_price})>"


class ProductVariant(Base):
    """Purchasable option of a product (e.g. size) adjusting its price"""
    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"),
                        nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price_modifier = Column(Numeric(10, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="variants")

    def __repr__(self):
        return (f"<ProductVariant(id={self.id}, product_id={self.product_id}, "
                f"price_modifier={self.price_modifier})>")
