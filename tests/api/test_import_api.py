import io

import pytest
from sqlalchemy.exc import OperationalError

from db import get_session
from db.models import Product, ProductVariant
from main import create_app

MASTER_CSV = (
    "Nama Produk,Nama Varian,SKU Master,SKU Varian 2,Brand,Parent Kategori,Base Price\n"
    "Lip Tint,Cherry,LT-01,8990001,Emina,Makeup,45000\n"
    "Lip Tint,Peach,LT-01,8990002,Emina,Makeup,45000\n"
)


@pytest.fixture
def app():
    app = create_app("sqlite://")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _upload(client, body, filename="products.csv", query=""):
    data = {"file": (io.BytesIO(body.encode("utf-8")), filename)}
    return client.post(f"/api/v1/products/import{query}", data=data,
                       content_type="multipart/form-data")


def _count(model):
    session = get_session()
    try:
        return session.query(model).count()
    finally:
        session.close()


def test_import_master_file(client):
    response = _upload(client, MASTER_CSV)

    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["errors"] == []
    assert data["stats"]["productCreated"] == 1
    assert data["stats"]["variantCreated"] == 2
    assert _count(Product) == 1
    assert _count(ProductVariant) == 2


def test_import_reports_row_errors(client):
    body = MASTER_CSV + ",Nameless,LT-02,8990003,Emina,Makeup,1\n"

    data = _upload(client, body).get_json()

    assert data["success"] is False
    assert data["errors"] == [{"row": 4, "message": "Nama Produk kosong"}]


def test_import_empty_file(client):
    data = _upload(client, "").get_json()

    assert data == {"success": False, "errors": [{"row": "-", "message": "File CSV kosong"}]}


def test_missing_file_field(client):
    response = client.post("/api/v1/products/import", data={}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_wrong_extension_rejected(client):
    response = _upload(client, MASTER_CSV, filename="products.xlsx")

    assert response.status_code == 400
    assert response.get_json()["message"] == "File harus berformat .csv"


def test_upload_too_large(app, client):
    app.config["MAX_CONTENT_LENGTH"] = 64

    response = _upload(client, MASTER_CSV * 10)

    assert response.status_code == 413


def test_malformed_csv_is_bad_request(client):
    response = _upload(client, 'name,category_type_id\n"broken "quote,1\n')

    assert response.status_code == 400
    assert response.get_json()["message"].startswith("Gagal membaca CSV")


def test_database_failure_is_500(client, monkeypatch):
    import api.routes_import as routes

    def boom(_path):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(routes, "run_import", boom)

    response = _upload(client, MASTER_CSV)

    assert response.status_code == 500
    assert response.get_json() == {
        "success": False, "message": "Import gagal, tidak ada data yang disimpan",
    }


def test_background_import_runs_eagerly_without_broker(client):
    response = _upload(client, MASTER_CSV, query="?background=1")

    assert response.status_code == 202
    assert response.get_json()["message"] == "Import sedang diproses di background."
    assert _count(Product) == 1


def test_cli_import_command(app, tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(MASTER_CSV)

    result = app.test_cli_runner().invoke(args=["import-products", str(path)])

    assert result.exit_code == 0
    assert "success=True" in result.output
    assert "productCreated: 1" in result.output
    assert _count(Product) == 1
