# backend/modules/catalog/tests/test_catalog_routes.py

from decimal import Decimal

from tests.factories import CategoryFactory, ProductFactory, ProductVariantFactory


class TestCatalogRoutes:

    def test_list_categories(self, client):
        CategoryFactory(name="Nigiri", sort_order=2)
        CategoryFactory(name="Sashimi", sort_order=1)

        response = client.get("/api/v1/catalog/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Sashimi", "Nigiri"]

    def test_list_products_with_variants(self, client):
        product = ProductFactory(name="Sashimi Saumon", base_price=Decimal("12.90"))
        ProductVariantFactory(product=product, name="Large", price_modifier=Decimal("12.00"))
        ProductFactory(name="Hidden", is_available=False)

        response = client.get("/api/v1/catalog/products")

        assert response.status_code == 200
        data = response.json()
        assert [p["name"] for p in data] == ["Sashimi Saumon"]
        assert data[0]["variants"][0]["name"] == "Large"
        assert Decimal(data[0]["base_price"]) == Decimal("12.90")

        response = client.get("/api/v1/catalog/products", params={"include_unavailable": True})
        assert len(response.json()) == 2

    def test_search_products(self, client):
        ProductFactory(name="Maki Saumon")
        ProductFactory(name="Nigiri Thon")

        response = client.get("/api/v1/catalog/products/search", params={"q": "maki"})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Maki Saumon"]

    def test_get_product_not_found(self, client):
        response = client.get("/api/v1/catalog/products/999")

        assert response.status_code == 404
        assert response.json()["detail"]["details"]["resource"] == "Product"

    def test_list_variants(self, client):
        product = ProductFactory()
        ProductVariantFactory(product=product, name="Standard", is_default=True)

        response = client.get("/api/v1/catalog/variants", params={"product_id": product.id})

        assert response.status_code == 200
        assert [v["name"] for v in response.json()] == ["Standard"]

    def test_import_catalog(self, client):
        payload = {
            "categories": [{"id": 10, "name": "Plateaux"}],
            "products": [
                {
                    "id": 20,
                    "category_id": 10,
                    "name": "Plateau Découverte",
                    "base_price": "29.90",
                    "variants": [{"id": 30, "name": "Standard", "is_default": True}],
                }
            ],
        }

        response = client.post("/api/v1/catalog/import", json=payload)

        assert response.status_code == 200
        assert response.json()["products_created"] == 1

        product = client.get("/api/v1/catalog/products/20").json()
        assert product["category"]["name"] == "Plateaux"

    def test_import_rejects_two_defaults(self, client):
        payload = {
            "categories": [{"id": 10, "name": "Plateaux"}],
            "products": [
                {
                    "id": 20,
                    "category_id": 10,
                    "name": "Plateau",
                    "base_price": "29.90",
                    "variants": [
                        {"id": 30, "name": "A", "is_default": True},
                        {"id": 31, "name": "B", "is_default": True},
                    ],
                }
            ],
        }

        response = client.post("/api/v1/catalog/import", json=payload)

        assert response.status_code == 422
