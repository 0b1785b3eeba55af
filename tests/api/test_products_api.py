"""
Product endpoints, including primary image and gallery ingestion
"""

import uuid
from urllib.parse import urlparse

from PIL import Image

from app.core.storage_utils import extract_filename_from_url
from conftest import make_image


PRODUCTS = "/api/v1/products"


def _uploaded_files(upload_dir) -> set[str]:
    return {p.name for p in upload_dir.iterdir() if p.is_file()}


class TestCreateProduct:

    def test_create_scenario(self, client, product, category, upload_dir):
        assert product["name"] == "Runner"
        assert product["price"] == 49.99
        assert product["countInStock"] == 10
        assert product["image"].endswith(".webp")
        assert product["image"].startswith("http://testserver/public/uploads/")
        assert product["images"] == []
        assert product["category"]["id"] == category["id"]
        assert product["category"]["name"] == "Shoes"

        filename = extract_filename_from_url(product["image"])
        assert filename.startswith("runner-")
        with Image.open(upload_dir / filename) as im:
            assert im.format == "WEBP"
            assert im.width <= 800

    def test_image_is_served_publicly(self, client, product):
        response = client.get(urlparse(product["image"]).path)

        assert response.status_code == 200
        assert response.content[:4] == b"RIFF"

    def test_wide_image_is_bounded(self, client, admin_headers, category, upload_dir):
        response = client.post(
            PRODUCTS,
            data={"name": "Wide", "price": "5", "category": category["id"]},
            files={"image": ("wide.png", make_image(2000, 1000, fmt="PNG"), "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        filename = extract_filename_from_url(response.json()["image"])
        with Image.open(upload_dir / filename) as im:
            assert im.size == (800, 400)

    def test_unsupported_type_is_rejected(self, client, admin_headers, category, upload_dir):
        response = client.post(
            PRODUCTS,
            data={"name": "Gif", "price": "5", "category": category["id"]},
            files={"image": ("anim.gif", make_image(fmt="GIF"), "image/gif")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert _uploaded_files(upload_dir) == set()
        assert client.get("/api/v1/products/get/count").json() == {"productCount": 0}

    def test_image_is_required(self, client, admin_headers, category):
        response = client.post(
            PRODUCTS,
            data={"name": "No image", "price": "5", "category": category["id"]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "No image in the request"

    def test_unknown_category(self, client, admin_headers, upload_dir):
        response = client.post(
            PRODUCTS,
            data={"name": "Orphan", "price": "5", "category": str(uuid.uuid4())},
            files={"image": ("a.jpg", make_image(), "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Category"
        assert _uploaded_files(upload_dir) == set()

    def test_corrupt_image(self, client, admin_headers, category):
        response = client.post(
            PRODUCTS,
            data={"name": "Broken", "price": "5", "category": category["id"]},
            files={"image": ("broken.jpg", b"not really a jpeg", "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 422

    def test_decompression_bomb_is_unprocessable(
        self, client, admin_headers, category, upload_dir, monkeypatch
    ):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        response = client.post(
            PRODUCTS,
            data={"name": "Bomb", "price": "5", "category": category["id"]},
            files={"image": ("bomb.png", make_image(200, 200, fmt="PNG"), "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert _uploaded_files(upload_dir) == set()

    def test_url_unsafe_file_name_still_resolves(self, client, admin_headers, category):
        response = client.post(
            PRODUCTS,
            data={"name": "Hash", "price": "5", "category": category["id"]},
            files={"image": ("my#shoe?.jpg", make_image(), "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        url = urlparse(response.json()["image"])
        assert url.fragment == "" and url.query == ""
        assert client.get(url.path).status_code == 200

    def test_requires_admin(self, client, user_headers, category):
        response = client.post(
            PRODUCTS,
            data={"name": "Nope", "price": "5", "category": category["id"]},
            files={"image": ("a.jpg", make_image(), "image/jpeg")},
            headers=user_headers,
        )

        assert response.status_code == 403


class TestUpdateProduct:

    def test_update_without_image_keeps_address(self, client, admin_headers, product, category):
        response = client.put(
            f"{PRODUCTS}/{product['id']}",
            data={"price": "39.5", "category": category["id"]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 39.5
        assert body["name"] == "Runner"
        assert body["image"] == product["image"]

    def test_new_image_replaces_and_retires_old_file(
        self, client, admin_headers, product, category, upload_dir
    ):
        old_file = extract_filename_from_url(product["image"])
        assert (upload_dir / old_file).exists()

        response = client.put(
            f"{PRODUCTS}/{product['id']}",
            data={"category": category["id"]},
            files={"image": ("second.png", make_image(fmt="PNG"), "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        new_file = extract_filename_from_url(response.json()["image"])
        assert new_file.startswith("second-")
        assert (upload_dir / new_file).exists()
        assert not (upload_dir / old_file).exists()

    def test_missing_old_file_does_not_fail_update(
        self, client, admin_headers, product, category, upload_dir
    ):
        (upload_dir / extract_filename_from_url(product["image"])).unlink()

        response = client.put(
            f"{PRODUCTS}/{product['id']}",
            data={"category": category["id"]},
            files={"image": ("third.png", make_image(fmt="PNG"), "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 200

    def test_unknown_product(self, client, admin_headers, category):
        response = client.put(
            f"{PRODUCTS}/{uuid.uuid4()}",
            data={"category": category["id"]},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_invalid_category(self, client, admin_headers, product):
        response = client.put(
            f"{PRODUCTS}/{product['id']}",
            data={"category": "not-a-uuid"},
            headers=admin_headers,
        )

        assert response.status_code == 400


class TestGallery:

    def _put_gallery(self, client, headers, product_id, names):
        files = [("images", (name, make_image(fmt="PNG"), "image/png")) for name in names]
        return client.put(f"{PRODUCTS}/gallery-images/{product_id}", files=files, headers=headers)

    def test_replace_three_then_two(self, client, admin_headers, product, upload_dir):
        first = self._put_gallery(client, admin_headers, product["id"], ["a.png", "b.png", "c.png"])
        assert first.status_code == 200
        first_files = [extract_filename_from_url(u) for u in first.json()["images"]]
        assert [f.split("-")[0] for f in first_files] == ["a", "b", "c"]

        second = self._put_gallery(client, admin_headers, product["id"], ["d.png", "e.png"])
        assert second.status_code == 200
        images = second.json()["images"]
        assert len(images) == 2

        for name in first_files:
            assert not (upload_dir / name).exists()
            assert all(name not in url for url in images)

        stored = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert stored["images"] == images

    def test_replay_same_set_is_idempotent_in_count(self, client, admin_headers, product):
        names = ["x.png", "y.png", "z.png"]
        for _ in range(2):
            response = self._put_gallery(client, admin_headers, product["id"], names)
            assert response.status_code == 200
            assert len(response.json()["images"]) == 3

    def test_more_than_five_is_rejected(self, client, admin_headers, product, upload_dir):
        before = _uploaded_files(upload_dir)

        response = self._put_gallery(
            client, admin_headers, product["id"], [f"{i}.png" for i in range(6)]
        )

        assert response.status_code == 400
        assert _uploaded_files(upload_dir) == before

    def test_bad_type_is_rejected_before_any_change(self, client, admin_headers, product):
        self._put_gallery(client, admin_headers, product["id"], ["keep.png"])

        files = [
            ("images", ("ok.png", make_image(fmt="PNG"), "image/png")),
            ("images", ("bad.gif", make_image(fmt="GIF"), "image/gif")),
        ]
        response = client.put(
            f"{PRODUCTS}/gallery-images/{product['id']}", files=files, headers=admin_headers
        )

        assert response.status_code == 400
        stored = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert len(stored["images"]) == 1

    def test_failure_midway_leaves_record_and_no_new_files(
        self, client, admin_headers, product, upload_dir
    ):
        previous = self._put_gallery(client, admin_headers, product["id"], ["old.png"]).json()["images"]

        files = [
            ("images", ("fresh.png", make_image(fmt="PNG"), "image/png")),
            ("images", ("broken.png", b"not a png", "image/png")),
        ]
        response = client.put(
            f"{PRODUCTS}/gallery-images/{product['id']}", files=files, headers=admin_headers
        )

        assert response.status_code == 422
        stored = client.get(f"{PRODUCTS}/{product['id']}").json()
        assert stored["images"] == previous
        assert not any(name.startswith("fresh-") for name in _uploaded_files(upload_dir))

    def test_unknown_product(self, client, admin_headers):
        response = self._put_gallery(client, admin_headers, uuid.uuid4(), ["a.png"])

        assert response.status_code == 404


class TestReadProducts:

    def test_get_unknown_is_404(self, client):
        assert client.get(f"{PRODUCTS}/{uuid.uuid4()}").status_code == 404

    def test_filter_by_categories(self, client, admin_headers, product, category):
        other = client.post(
            "/api/v1/categories", json={"name": "Hats"}, headers=admin_headers
        ).json()

        match = client.get(PRODUCTS, params={"categories": f"{category['id']},{uuid.uuid4()}"})
        assert [p["id"] for p in match.json()] == [product["id"]]

        empty = client.get(PRODUCTS, params={"categories": other["id"]})
        assert empty.json() == []

    def test_filter_with_bad_id(self, client):
        response = client.get(PRODUCTS, params={"categories": "nope"})

        assert response.status_code == 400

    def test_featured_and_count(self, client, admin_headers, category):
        for i, featured in enumerate(["true", "true", "false"]):
            client.post(
                PRODUCTS,
                data={
                    "name": f"P{i}",
                    "price": "1",
                    "category": category["id"],
                    "isFeatured": featured,
                },
                files={"image": (f"p{i}.jpg", make_image(), "image/jpeg")},
                headers=admin_headers,
            )

        assert client.get(f"{PRODUCTS}/get/count").json() == {"productCount": 3}
        assert len(client.get(f"{PRODUCTS}/get/featured/1").json()) == 1
        featured = client.get(f"{PRODUCTS}/get/featured/10").json()
        assert {p["name"] for p in featured} == {"P0", "P1"}


class TestDeleteProduct:

    def test_delete_removes_record_and_files(self, client, admin_headers, product, upload_dir):
        response = client.delete(f"{PRODUCTS}/{product['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "the product is deleted!"}
        assert client.get(f"{PRODUCTS}/{product['id']}").status_code == 404
        assert _uploaded_files(upload_dir) == set()

    def test_delete_twice(self, client, admin_headers, product):
        client.delete(f"{PRODUCTS}/{product['id']}", headers=admin_headers)

        response = client.delete(f"{PRODUCTS}/{product['id']}", headers=admin_headers)

        assert response.status_code == 404
