"""HTTP tests for the product catalog."""

import uuid

import pytest
from fastapi.testclient import TestClient


PRODUCT = {
    "name": "Desk Lamp",
    "description": "Adjustable LED lamp",
    "price": 39.9,
    "stock": 12,
    "category": "home",
    "brand": "Lumen",
    "sku": "LAMP-001",
}


def _create(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    response = client.post("/products", json={**PRODUCT, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


IMAGE_BYTES = b"\0" * 256


class TestProtection:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("post", "/products"),
            ("put", f"/products/{uuid.uuid4()}"),
            ("delete", f"/products/{uuid.uuid4()}"),
            ("post", f"/products/{uuid.uuid4()}/image"),
        ],
    )
    def test_writes_require_token(self, client: TestClient, method: str, path: str):
        response = client.request(method, path, json=PRODUCT)

        assert response.status_code == 401
        assert response.json() == {"error": "Token not found"}

    def test_reads_are_public(self, client: TestClient):
        assert client.get("/products").status_code == 200
        assert client.get("/products/categories").status_code == 200


class TestCrud:
    def test_create_product(self, client: TestClient, auth_headers: dict[str, str]):
        response = client.post("/products", json=PRODUCT, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Product created successfully"
        data = body["data"]
        uuid.UUID(data["id"])
        assert data["name"] == "Desk Lamp"
        assert data["status"] == "active"
        assert data["image_url"] is None
        assert "image_path" not in data

    def test_create_validation_error(
        self, client: TestClient, auth_headers: dict[str, str]
    ):
        response = client.post(
            "/products", json={"name": "No price"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request data"

    def test_negative_price_rejected(
        self, client: TestClient, auth_headers: dict[str, str]
    ):
        response = client.post(
            "/products", json={**PRODUCT, "price": -1}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_out_of_range_stock_rejected(
        self, client: TestClient, auth_headers: dict[str, str]
    ):
        response = client.post(
            "/products", json={**PRODUCT, "stock": 2**70}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request data"

    def test_duplicate_sku_is_400(self, client: TestClient, auth_headers: dict[str, str]):
        _create(client, auth_headers)

        response = client.post("/products", json=PRODUCT, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "SKU already exists"}

    def test_get_product(self, client: TestClient, auth_headers: dict[str, str]):
        created = _create(client, auth_headers)

        response = client.get(f"/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_invalid_id(self, client: TestClient):
        response = client.get("/products/not-a-uuid")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}

    def test_get_unknown_id(self, client: TestClient):
        response = client.get(f"/products/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Product not found"}

    def test_partial_update(self, client: TestClient, auth_headers: dict[str, str]):
        created = _create(client, auth_headers)

        response = client.put(
            f"/products/{created['id']}", json={"price": 49.5}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert response.json()["message"] == "Product updated successfully"
        assert data["price"] == 49.5
        for field in ("name", "description", "category", "brand", "sku", "stock"):
            assert data[field] == created[field]

    def test_update_unknown_product(self, client: TestClient, auth_headers: dict[str, str]):
        response = client.put(
            f"/products/{uuid.uuid4()}", json={"price": 1}, headers=auth_headers
        )

        assert response.status_code == 404

    def test_delete_product(self, client: TestClient, auth_headers: dict[str, str]):
        created = _create(client, auth_headers)

        response = client.delete(f"/products/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        assert client.get(f"/products/{created['id']}").status_code == 404

    def test_sku_of_deleted_product_still_reserved(
        self, client: TestClient, auth_headers: dict[str, str]
    ):
        """Soft-deleted rows keep their unique SKU."""
        created = _create(client, auth_headers)
        client.delete(f"/products/{created['id']}", headers=auth_headers)

        response = client.post("/products", json=PRODUCT, headers=auth_headers)

        assert response.status_code == 400


class TestListing:
    def test_pagination_envelope(self, client: TestClient, auth_headers: dict[str, str]):
        for i in range(25):
            _create(client, auth_headers, name=f"Item {i}", sku=f"SKU-{i}")

        pages = [
            client.get("/products", params={"page": page, "limit": 10}).json()
            for page in (1, 2, 3)
        ]

        assert [len(p["data"]) for p in pages] == [10, 10, 5]
        assert pages[2]["pagination"] == {
            "page": 3,
            "limit": 10,
            "total": 25,
            "total_pages": 3,
        }
        assert pages[0]["message"] == "Products retrieved successfully"

    def test_filters(self, client: TestClient, auth_headers: dict[str, str]):
        _create(
            client,
            auth_headers,
            name="Garden Hose",
            description="Rubber hose",
            category="garden",
            sku="G-1",
        )
        _create(client, auth_headers, name="Desk Lamp", category="home", sku="H-1")
        _create(
            client,
            auth_headers,
            name="Old Lamp",
            category="home",
            sku="H-2",
            status="discontinued",
        )

        def names(**params) -> set[str]:
            return {p["name"] for p in client.get("/products", params=params).json()["data"]}

        assert names() == {"Garden Hose", "Desk Lamp"}
        assert names(category="home") == {"Desk Lamp"}
        assert names(category="home", status="") == {"Desk Lamp", "Old Lamp"}
        assert names(search="lamp", status="") == {"Desk Lamp", "Old Lamp"}
        # "rubber" appears only in the hose's description.
        assert names(search="RUBBER") == {"Garden Hose"}

    @pytest.mark.parametrize("param", ["page", "limit"])
    def test_out_of_range_paging_is_400(self, client: TestClient, param: str):
        response = client.get("/products", params={param: 99999999999999999999})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request data"

    def test_categories(self, client: TestClient, auth_headers: dict[str, str]):
        _create(client, auth_headers, category="home", sku="A")
        _create(client, auth_headers, category="garden", sku="B")
        _create(client, auth_headers, category="home", sku="C")

        response = client.get("/products/categories")

        assert response.json() == {
            "message": "Categories retrieved successfully",
            "data": ["garden", "home"],
        }


class TestImageUpload:
    def test_upload_and_serve_image(
        self, client: TestClient, auth_headers: dict[str, str]
    ):
        created = _create(client, auth_headers)

        response = client.post(
            f"/products/{created['id']}/image",
            files={"image": ("lamp.png", IMAGE_BYTES, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Image uploaded successfully"
        image_url = body["image_url"]
        assert image_url.startswith("http://testserver/uploads/products/")
        assert image_url.endswith(".png")

        served = client.get(image_url.removeprefix("http://testserver"))
        assert served.status_code == 200
        assert served.content == IMAGE_BYTES

        product = client.get(f"/products/{created['id']}").json()["data"]
        assert product["image_url"] == image_url

    def test_missing_file(self, client: TestClient, auth_headers: dict[str, str]):
        created = _create(client, auth_headers)

        response = client.post(
            f"/products/{created['id']}/image",
            data={"other": "field"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No image file provided"}

    def test_wrong_type(self, client: TestClient, auth_headers: dict[str, str]):
        created = _create(client, auth_headers)

        response = client.post(
            f"/products/{created['id']}/image",
            files={"image": ("setup.exe", b"MZ\x90\x00", "application/octet-stream")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert "Invalid file type" in response.json()["error"]

    def test_unknown_product(self, client: TestClient, auth_headers: dict[str, str]):
        response = client.post(
            f"/products/{uuid.uuid4()}/image",
            files={"image": ("lamp.png", IMAGE_BYTES, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_invalid_product_id(self, client: TestClient, auth_headers: dict[str, str]):
        response = client.post(
            "/products/123/image",
            files={"image": ("lamp.png", IMAGE_BYTES, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid product ID"}
