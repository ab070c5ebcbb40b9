import json

import pytest

from core.infrastructure.providers.mongodb_metadata import MongoDBMetadata
from handlers.save_image.handler import handler
from handlers.save_image.models import SaveImageRequest

VALID_BODY = {
    "originalFilename": "direct.png",
    "cloudinaryUrl": "https://res.cloudinary.com/demo-cloud/image/upload/image-to-link-direct/abc",
    "cloudinaryPublicId": "image-to-link-direct/abc",
    "fileSize": 2048,
    "fileType": "image/png",
}


def save_event(body) -> dict:
    return {
        "httpMethod": "POST",
        "path": "/api/save-image",
        "headers": {"Content-Type": "application/json"},
        "body": body if isinstance(body, str) else json.dumps(body),
    }


class TestSaveImageRequest:
    @pytest.mark.parametrize(
        "overrides",
        [{}, {"fileSize": None, "fileType": None}, {"fileSize": 0, "fileType": ""}],
    )
    def test_defaults_for_blank_optional_fields(self, overrides) -> None:
        payload = {k: v for k, v in VALID_BODY.items() if k not in ("fileSize", "fileType")}
        payload.update(overrides)

        request = SaveImageRequest.model_validate(payload)

        assert request.file_size_bytes == 0
        assert request.content_type == "image/jpeg"

    def test_negative_size(self) -> None:
        with pytest.raises(ValueError):
            SaveImageRequest.model_validate({**VALID_BODY, "fileSize": -1})


class TestSaveImageHandler:
    def test_persists_record(self, mongo_connection, lambda_context) -> None:
        response = handler(save_event(VALID_BODY), lambda_context)
        body = json.loads(response["body"])

        assert response["statusCode"] == 200
        assert body["success"] is True
        assert body["data"]["cloudinaryPublicId"] == "image-to-link-direct/abc"
        assert body["data"]["fileSize"] == 2048

        stored = MongoDBMetadata().fetch_record(image_id=body["data"]["_id"])
        assert stored is not None
        assert stored.original_filename == "direct.png"

    @pytest.mark.parametrize("missing", ["originalFilename", "cloudinaryUrl", "cloudinaryPublicId"])
    def test_missing_required_field(self, mongo_connection, lambda_context, missing) -> None:
        payload = {k: v for k, v in VALID_BODY.items() if k != missing}

        response = handler(save_event(payload), lambda_context)
        body = json.loads(response["body"])

        assert response["statusCode"] == 400
        assert body["message"] == "Missing required image data"
        assert MongoDBMetadata().list_records() == []

    def test_malformed_json(self, mongo_connection, lambda_context) -> None:
        response = handler(save_event("[1, 2"), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "MALFORMED_BODY"
