"""
Category endpoints
"""

import uuid

CATEGORIES = "/api/v1/categories"


class TestCategoryAPI:

    def test_create_and_get(self, client, category):
        response = client.get(f"{CATEGORIES}/{category['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "id": category["id"],
            "name": "Shoes",
            "icon": "shoe",
            "color": "#333333",
        }

    def test_list(self, client, category):
        response = client.get(CATEGORIES)

        assert [c["id"] for c in response.json()] == [category["id"]]

    def test_get_unknown_is_404(self, client):
        assert client.get(f"{CATEGORIES}/{uuid.uuid4()}").status_code == 404

    def test_blank_name_is_rejected(self, client, admin_headers):
        response = client.post(CATEGORIES, json={"name": "   "}, headers=admin_headers)

        assert response.status_code == 422

    def test_update(self, client, admin_headers, category):
        response = client.put(
            f"{CATEGORIES}/{category['id']}",
            json={"name": "Sneakers", "color": "#000000"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Sneakers"
        assert response.json()["icon"] is None

    def test_update_unknown_does_not_create(self, client, admin_headers):
        response = client.put(
            f"{CATEGORIES}/{uuid.uuid4()}",
            json={"name": "Ghost"},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert client.get(CATEGORIES).json() == []

    def test_delete(self, client, admin_headers, category):
        response = client.delete(f"{CATEGORIES}/{category['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"{CATEGORIES}/{category['id']}").status_code == 404

    def test_delete_in_use_leaves_products_uncategorised(
        self, client, admin_headers, product, category
    ):
        response = client.delete(f"{CATEGORIES}/{category['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        stored = client.get(f"/api/v1/products/{product['id']}")
        assert stored.status_code == 200
        assert stored.json()["category"] is None
