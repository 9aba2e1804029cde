# backend/modules/cart/services/pricing_service.py

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from modules.catalog.schemas.catalog_schemas import ProductWithVariants

CENT = Decimal("0.01")


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Normalise an amount to two decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_item_price(
    product: ProductWithVariants, variant_id: Optional[int] = None
) -> Decimal:
    """
    Unit price of a product, adjusted by the selected variant.

    A variant id that does not belong to the product is ignored and the base
    price is returned, so a stale variant reference never blocks an add.
    """
    price = to_money(product.base_price)

    variant = product.find_variant(variant_id)
    if variant is not None:
        price += to_money(variant.price_modifier)

    return price
