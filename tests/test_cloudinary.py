from ecommerce.config import Config


def test_upload_config(client, admin_headers):
    resp = client.get("/api/Cloudinary/GetUploadConfig", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"cloudName": "demo-cloud", "uploadPreset": "unsigned-preset"}


def test_upload_config_needs_admin(client, user_headers):
    resp = client.get("/api/Cloudinary/GetUploadConfig", headers=user_headers)
    assert resp.status_code == 403


def test_missing_preset_is_400(client, admin_headers, monkeypatch):
    monkeypatch.setattr(Config, "CLOUDINARY_UPLOAD_PRESET", "")
    resp = client.get("/api/Cloudinary/GetUploadConfig", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Cloudinary UploadPreset is not configured"
