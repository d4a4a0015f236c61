"""Integration tests for Product API endpoints.

Covers:
- public listing envelope, search and pagination edge cases.
- detail lookups for unknown, malformed and deleted IDs.
- admin create/update/delete with JSON and multipart bodies.
- the image upload endpoint with a patched Cloudinary SDK.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import cloudinary.exceptions
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from modules.products.models import Product

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"
UPLOADED_URL = "https://res.cloudinary.com/demo/image/upload/v7/products/lamp.png"


def _detail_url(product_id) -> str:
    return f"{PRODUCTS_URL}{product_id}/"


def _payload(**overrides):
    return {
        "name": "Desk Lamp",
        "description": "LED desk lamp",
        "price": "29.90",
        "stock": 4,
        "category": "Home",
        **overrides,
    }


def _png(name="lamp.png") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, b"\x89PNG\r\n", content_type="image/png")


@pytest.fixture()
def cloudinary_configured(settings):
    settings.CLOUDINARY = {
        "cloud_name": "demo",
        "api_key": "key",
        "api_secret": "secret",
        "folder": "products",
    }
    with patch("cloudinary.uploader.upload") as upload:
        upload.return_value = {"secure_url": UPLOADED_URL, "public_id": "products/lamp"}
        yield upload


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


class TestListProducts:
    def test_is_public_and_uses_envelope(self, api_client, make_product):
        make_product("Mouse", price="49.99")

        response = api_client.get(PRODUCTS_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["currentPage"] == 1
        assert body["pageSize"] == 1
        assert body["totalPages"] == 1
        assert body["totalProducts"] == 1
        product = body["products"][0]
        assert product["name"] == "Mouse"
        assert product["price"] == 49.99
        assert product["imageUrl"] == ""

    def test_newest_first(self, api_client, make_product):
        make_product("Older")
        make_product("Newer")
        names = [p["name"] for p in api_client.get(PRODUCTS_URL).json()["products"]]
        assert names == ["Newer", "Older"]

    def test_search_is_case_insensitive_substring(self, api_client, make_product):
        make_product("Wireless Mouse")
        make_product("Mouse Pad")
        make_product("Keyboard")

        body = api_client.get(PRODUCTS_URL, {"search": "mOuSe"}).json()

        assert body["totalProducts"] == 2
        assert {p["name"] for p in body["products"]} == {"Wireless Mouse", "Mouse Pad"}

    def test_pagination(self, api_client, make_product):
        for i in range(5):
            make_product(f"Item {i}")

        body = api_client.get(PRODUCTS_URL, {"page": 3, "pageSize": 2}).json()

        assert body["currentPage"] == 3
        assert body["pageSize"] == 1
        assert body["totalPages"] == 3
        assert body["totalProducts"] == 5

    def test_limit_alias(self, api_client, make_product):
        for i in range(3):
            make_product(f"Item {i}")
        body = api_client.get(PRODUCTS_URL, {"limit": 2}).json()
        assert len(body["products"]) == 2

    def test_page_past_the_end_is_empty(self, api_client, make_product):
        make_product()
        body = api_client.get(PRODUCTS_URL, {"page": 50}).json()
        assert body["products"] == []
        assert body["totalProducts"] == 1

    def test_huge_page_number_is_empty(self, api_client, make_product):
        make_product()
        response = api_client.get(PRODUCTS_URL, {"page": str(10**20)})
        assert response.status_code == 200
        assert response.json()["products"] == []

    def test_invalid_paging_falls_back_to_defaults(self, api_client, make_product):
        make_product()
        body = api_client.get(PRODUCTS_URL, {"page": "x", "pageSize": "0"}).json()
        assert body["currentPage"] == 1
        assert body["totalProducts"] == 1

    def test_hides_deleted_products(self, api_client, make_product):
        make_product("Gone").delete()
        make_product("Here")
        body = api_client.get(PRODUCTS_URL).json()
        assert [p["name"] for p in body["products"]] == ["Here"]

    def test_empty_catalog(self, api_client):
        body = api_client.get(PRODUCTS_URL).json()
        assert body["products"] == []
        assert body["totalPages"] == 0


# ---------------------------------------------------------------------------
# Retrieve
# ---------------------------------------------------------------------------


class TestRetrieveProduct:
    def test_found(self, api_client, make_product, admin):
        product = make_product()
        response = api_client.get(_detail_url(product.id))
        assert response.status_code == 200
        assert response.json()["id"] == str(product.id)
        assert response.json()["user_id"] == str(admin.id)

    @pytest.mark.parametrize("product_id", [uuid4(), "not-a-uuid"])
    def test_unknown_or_malformed(self, api_client, product_id):
        response = api_client.get(_detail_url(product_id))
        assert response.status_code == 404
        assert response.json() == {"detail": "Product not found."}

    def test_deleted(self, api_client, make_product):
        product = make_product()
        product.delete()
        assert api_client.get(_detail_url(product.id)).status_code == 404


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateProduct:
    def test_json_body(self, admin_api_client, admin):
        response = admin_api_client.post(PRODUCTS_URL, _payload(), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Product created successfully"
        assert body["product"]["price"] == 29.9
        assert body["product"]["user_id"] == str(admin.id)
        assert Product.objects.get(name="Desk Lamp").price == Decimal("29.90")

    def test_missing_fields_are_listed(self, admin_api_client):
        response = admin_api_client.post(
            PRODUCTS_URL, {"name": "Lamp", "stock": 1}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Missing required fields: description, price, category"
        )

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"price": "-1"}, "Price must be a positive number."),
            ({"price": "1.999"}, "Price must have at most two decimal places."),
            ({"stock": -2}, "Stock must be a non-negative integer."),
            ({"name": "   "}, "Name must not be empty."),
            ({"name": "n" * 256}, "Name must be at most 255 characters."),
            ({"stock": 2**31}, "Stock must not exceed 2147483647."),
        ],
    )
    def test_invalid_values(self, admin_api_client, overrides, message):
        response = admin_api_client.post(PRODUCTS_URL, _payload(**overrides), format="json")
        assert response.status_code == 400
        assert response.json()["detail"] == message
        assert Product.objects.count() == 0

    def test_anonymous_is_rejected(self, api_client):
        response = api_client.post(PRODUCTS_URL, _payload(), format="json")
        assert response.status_code == 401

    def test_multipart_with_image(self, admin_api_client, cloudinary_configured):
        response = admin_api_client.post(
            PRODUCTS_URL, _payload(image=_png()), format="multipart"
        )

        assert response.status_code == 201
        assert response.json()["product"]["imageUrl"] == UPLOADED_URL
        assert response.json()["product"]["stock"] == 4
        kwargs = cloudinary_configured.call_args.kwargs
        assert kwargs["folder"] == "products"
        assert kwargs["resource_type"] == "image"

    def test_image_rejected_by_extension(self, admin_api_client, cloudinary_configured):
        response = admin_api_client.post(
            PRODUCTS_URL, _payload(image=_png("lamp.bmp")), format="multipart"
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid file type: .bmp")
        assert Product.objects.count() == 0

    def test_image_without_storage_configured(self, admin_api_client):
        response = admin_api_client.post(
            PRODUCTS_URL, _payload(image=_png()), format="multipart"
        )
        assert response.status_code == 503
        assert Product.objects.count() == 0


# ---------------------------------------------------------------------------
# Update / Delete
# ---------------------------------------------------------------------------


class TestUpdateProduct:
    def test_partial_update(self, admin_api_client, make_product):
        product = make_product(stock=10)

        response = admin_api_client.patch(
            _detail_url(product.id), {"stock": 2, "price": "15.00"}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Product updated successfully"
        assert body["product"]["stock"] == 2
        assert body["product"]["price"] == 15.0
        assert body["product"]["name"] == product.name

    def test_put_accepts_subset(self, admin_api_client, make_product):
        product = make_product()
        response = admin_api_client.put(
            _detail_url(product.id), {"category": "Gadgets"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["product"]["category"] == "Gadgets"

    def test_invalid_value(self, admin_api_client, make_product):
        product = make_product()
        response = admin_api_client.patch(
            _detail_url(product.id), {"price": "0"}, format="json"
        )
        assert response.status_code == 400

    def test_unknown_product(self, admin_api_client):
        response = admin_api_client.patch(_detail_url(uuid4()), {"stock": 1}, format="json")
        assert response.status_code == 404


class TestDeleteProduct:
    def test_soft_deletes(self, admin_api_client, make_product):
        product = make_product()

        response = admin_api_client.delete(_detail_url(product.id))

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        product.refresh_from_db()
        assert product.is_deleted

    def test_twice_is_not_found(self, admin_api_client, make_product):
        product = make_product()
        admin_api_client.delete(_detail_url(product.id))
        assert admin_api_client.delete(_detail_url(product.id)).status_code == 404

    def test_queues_image_removal(
        self, admin_api_client, make_product, django_capture_on_commit_callbacks
    ):
        product = make_product(
            image_url="https://res.cloudinary.com/demo/image/upload/v3/products/old.jpg"
        )
        with patch("modules.products.tasks.delete_product_image") as task:
            with django_capture_on_commit_callbacks(execute=True):
                admin_api_client.delete(_detail_url(product.id))
        task.delay.assert_called_once_with("products/old")


# ---------------------------------------------------------------------------
# Image upload
# ---------------------------------------------------------------------------


class TestUploadImage:
    def _url(self, product_id) -> str:
        return f"{_detail_url(product_id)}image/"

    def test_replaces_image(self, admin_api_client, make_product, cloudinary_configured):
        product = make_product()

        response = admin_api_client.post(
            self._url(product.id), {"image": _png()}, format="multipart"
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Image uploaded successfully",
            "imageUrl": UPLOADED_URL,
        }
        product.refresh_from_db()
        assert product.image_url == UPLOADED_URL

    def test_missing_file(self, admin_api_client, make_product, cloudinary_configured):
        product = make_product()
        response = admin_api_client.post(self._url(product.id), {}, format="multipart")
        assert response.status_code == 400
        assert response.json() == {"detail": "No image file provided"}

    def test_storage_not_configured(self, admin_api_client, make_product):
        product = make_product()
        response = admin_api_client.post(
            self._url(product.id), {"image": _png()}, format="multipart"
        )
        assert response.status_code == 503
        assert response.json() == {"detail": "Image upload service is not available"}

    def test_unknown_product(self, admin_api_client, cloudinary_configured):
        response = admin_api_client.post(
            self._url(uuid4()), {"image": _png()}, format="multipart"
        )
        assert response.status_code == 404

    def test_cloudinary_failure_is_bad_gateway(
        self, admin_api_client, make_product, cloudinary_configured
    ):
        cloudinary_configured.side_effect = cloudinary.exceptions.Error("quota exceeded")
        product = make_product()

        response = admin_api_client.post(
            self._url(product.id), {"image": _png()}, format="multipart"
        )

        assert response.status_code == 502
        product.refresh_from_db()
        assert product.image_url == ""

    def test_regular_user_forbidden(self, shopper_client, make_product):
        product = make_product()
        response = shopper_client.post(
            self._url(product.id), {"image": _png()}, format="multipart"
        )
        assert response.status_code == 403
