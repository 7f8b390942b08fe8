import pytest

from conftest import PNG_BYTES
from models import Service
from security import issue_file_token


def _service_form(vendor_id, **overrides):
    form = {
        "vendor_id": str(vendor_id),
        "title": "Sisal basket",
        "description": "Hand woven",
        "price": "850",
        "unit": "piece",
        "category": "crafts",
    }
    form.update(overrides)
    return form


class TestCatalog:
    def test_count(self, client, marketplace):
        response = client.get("/api/services/count")
        assert response.json() == {"totalServices": 1}

    def test_list_filtered_by_vendor(self, client, marketplace):
        client.post("/api/services", data=_service_form(marketplace["vendor_id"]))

        everything = client.get("/api/services").json()
        mine = client.get("/api/services", params={"vendor_id": marketplace["vendor_id"]}).json()
        nobody = client.get("/api/services", params={"vendor_id": 999}).json()

        assert len(everything) == 2
        assert {s["title"] for s in mine} == {"Beaded necklace", "Sisal basket"}
        assert nobody == []

    def test_create_with_image(self, client, db, marketplace, upload_dir):
        response = client.post(
            "/api/services",
            data=_service_form(marketplace["vendor_id"]),
            files={"image": ("basket photo (1).png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 201
        body = response.json()
        service = db.get(Service, body["id"])
        assert service.image == body["image"]
        assert service.price == 850.0
        assert (upload_dir / body["image"]).exists()
        assert body["download_token"]

    def test_create_without_image(self, client, db, marketplace):
        response = client.post("/api/services", data=_service_form(marketplace["vendor_id"]))

        assert response.status_code == 201
        assert response.json()["image"] is None
        assert "download_token" not in response.json()

    def test_pdf_upload_is_rejected_before_any_write(self, client, db, marketplace, upload_dir):
        response = client.post(
            "/api/services",
            data=_service_form(marketplace["vendor_id"]),
            files={"image": ("menu.pdf", b"%PDF-1.4 fake", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only JPEG, PNG, or WebP allowed"
        assert db.query(Service).count() == 1
        assert list(upload_dir.iterdir()) == []

    def test_oversized_upload_is_rejected(self, client, db, marketplace):
        big = b"\xff\xd8" + b"\x00" * (2 * 1024 * 1024)
        response = client.post(
            "/api/services",
            data=_service_form(marketplace["vendor_id"]),
            files={"image": ("huge.jpg", big, "image/jpeg")},
        )

        assert response.status_code == 400
        assert db.query(Service).count() == 1

    def test_missing_required_field(self, client, db, marketplace):
        form = _service_form(marketplace["vendor_id"])
        del form["category"]

        response = client.post("/api/services", data=form)

        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields"

    def test_non_numeric_price(self, client, marketplace):
        response = client.post("/api/services", data=_service_form(marketplace["vendor_id"], price="cheap"))
        assert response.status_code == 400

    @pytest.mark.parametrize("price", ["inf", "-inf", "nan", "Infinity"])
    def test_non_finite_price_is_rejected(self, client, db, marketplace, price):
        response = client.post("/api/services", data=_service_form(marketplace["vendor_id"], price=price))

        assert response.status_code == 400
        assert db.query(Service).count() == 1
        assert client.get("/api/services").status_code == 200

    def test_unknown_vendor(self, client, db):
        response = client.post("/api/services", data=_service_form(42))

        assert response.status_code == 404
        assert db.query(Service).count() == 0

    def test_delete_twice(self, client, marketplace):
        first = client.delete(f"/api/services/{marketplace['service_id']}")
        second = client.delete(f"/api/services/{marketplace['service_id']}")

        assert first.status_code == 200
        assert second.status_code == 404
        assert second.json()["message"] == "Service not found"


class TestSecureFile:
    def _store(self, upload_dir, name="receipt.png"):
        (upload_dir / name).write_bytes(PNG_BYTES)
        return name

    def test_wrong_token_is_forbidden_even_if_file_exists(self, client, upload_dir):
        name = self._store(upload_dir)

        for token in ["naimarket_secure_token", "garbage", ""]:
            response = client.get("/api/services/secure-file", params={"file": name, "token": token})
            assert response.status_code == 403

    def test_token_for_another_file_is_forbidden(self, client, upload_dir):
        name = self._store(upload_dir)
        token = issue_file_token("other.png")

        response = client.get("/api/services/secure-file", params={"file": name, "token": token})

        assert response.status_code == 403

    def test_expired_token_is_forbidden(self, client, upload_dir):
        name = self._store(upload_dir)
        token = issue_file_token(name, ttl_seconds=-60)

        response = client.get("/api/services/secure-file", params={"file": name, "token": token})

        assert response.status_code == 403

    def test_valid_token_missing_file(self, client):
        token = issue_file_token("missing.png")

        response = client.get("/api/services/secure-file", params={"file": "missing.png", "token": token})

        assert response.status_code == 404

    def test_valid_token_streams_file(self, client, upload_dir):
        name = self._store(upload_dir)
        token = issue_file_token(name)

        response = client.get("/api/services/secure-file", params={"file": name, "token": token})

        assert response.status_code == 200
        assert response.content == PNG_BYTES

    def test_alias_route(self, client, upload_dir):
        name = self._store(upload_dir)

        response = client.get("/api/secure-file", params={"file": name, "token": issue_file_token(name)})

        assert response.status_code == 200

    def test_path_traversal_is_not_served(self, client):
        name = "../conftest.py"

        response = client.get("/api/services/secure-file", params={"file": name, "token": issue_file_token(name)})

        assert response.status_code == 404

    def test_token_from_upload_response_works(self, client, marketplace):
        created = client.post(
            "/api/services",
            data=_service_form(marketplace["vendor_id"]),
            files={"image": ("basket.png", PNG_BYTES, "image/png")},
        ).json()

        response = client.get(
            "/api/services/secure-file",
            params={"file": created["image"], "token": created["download_token"]},
        )

        assert response.status_code == 200
        assert response.content == PNG_BYTES


def test_static_uploads_are_served(client, upload_dir):
    (upload_dir / "banner.png").write_bytes(PNG_BYTES)

    assert client.get("/uploads/banner.png").content == PNG_BYTES
    assert client.get("/uploads/nope.png").status_code == 404
