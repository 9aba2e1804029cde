# backend/modules/catalog/data/fallback_catalog.py

from typing import List, Dict, Any


# Served when the catalog store is unreachable so the storefront stays browsable
FALLBACK_CATEGORIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Sashimi",
        "description": "Tranches de poisson frais sans riz",
        "image_url": "https://images.pexels.com/photos/357756/pexels-photo-357756.jpeg",
        "sort_order": 1,
        "is_active": True,
    },
    {
        "id": 2,
        "name": "Nigiri",
        "description": "Riz vinaigré surmonté de poisson",
        "image_url": "https://images.pexels.com/photos/2323398/pexels-photo-2323398.jpeg",
        "sort_order": 2,
        "is_active": True,
    },
    {
        "id": 3,
        "name": "Maki",
        "description": "Rouleaux de sushi traditionnels",
        "image_url": "https://images.pexels.com/photos/2098085/pexels-photo-2098085.jpeg",
        "sort_order": 3,
        "is_active": True,
    },
]

FALLBACK_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "category_id": 1,
        "name": "Sashimi Saumon",
        "description": "6 tranches de saumon frais de Norvège",
        "base_price": "12.90",
        "image_url": "https://images.pexels.com/photos/357756/pexels-photo-357756.jpeg",
        "is_popular": True,
        "is_available": True,
        "allergens": ["poisson"],
        "nutritional_info": {},
        "preparation_time": 10,
        "sort_order": 1,
    },
    {
        "id": 2,
        "category_id": 2,
        "name": "Nigiri Saumon",
        "description": "Riz vinaigré surmonté de saumon frais",
        "base_price": "3.80",
        "image_url": "https://images.pexels.com/photos/2323398/pexels-photo-2323398.jpeg",
        "is_popular": True,
        "is_available": True,
        "allergens": ["poisson", "gluten"],
        "nutritional_info": {},
        "preparation_time": 5,
        "sort_order": 1,
    },
    {
        "id": 3,
        "category_id": 3,
        "name": "Maki Saumon",
        "description": "6 pièces au saumon frais et avocat",
        "base_price": "7.90",
        "image_url": "https://images.pexels.com/photos/2098085/pexels-photo-2098085.jpeg",
        "is_popular": False,
        "is_available": True,
        "allergens": ["poisson", "gluten"],
        "nutritional_info": {},
        "preparation_time": 8,
        "sort_order": 1,
    },
]

FALLBACK_VARIANTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "product_id": 1,
        "name": "Standard (6 pièces)",
        "price_modifier": "0.00",
        "is_default": True,
        "is_available": True,
        "sort_order": 1,
    },
    {
        "id": 2,
        "product_id": 1,
        "name": "Large (12 pièces)",
        "price_modifier": "12.00",
        "is_default": False,
        "is_available": True,
        "sort_order": 2,
    },
]
