from unittest.mock import MagicMock, patch

import cloudinary.utils
import pytest

from core.infrastructure.adapters.cloudinary_adapter import CloudinaryAdapter
from core.models.errors import ConfigurationError

CREDENTIALS = {
    "cloud_name": "demo-cloud",
    "api_key": "123456789012345",
    "api_secret": "test-secret",
    "secure": True,
}


class TestCloudinaryAdapter:
    def test_requires_credentials(self, monkeypatch) -> None:
        monkeypatch.delenv("CLOUDINARY_API_SECRET", raising=False)

        with pytest.raises(ConfigurationError):
            CloudinaryAdapter()

    def test_upload_passes_credentials_per_call(self, monkeypatch) -> None:
        monkeypatch.setenv("CLOUDINARY_TIMEOUT_SECONDS", "15")
        mock_upload = MagicMock(return_value={"public_id": "f/x"})

        with patch("cloudinary.uploader.upload", mock_upload):
            result = CloudinaryAdapter().upload(file="/tmp/x.png", folder="f", resource_type="auto")

        assert result == {"public_id": "f/x"}
        mock_upload.assert_called_once_with(
            "/tmp/x.png",
            folder="f",
            resource_type="auto",
            timeout=15,
            **CREDENTIALS,
        )

    def test_destroy(self) -> None:
        mock_destroy = MagicMock(return_value={"result": "ok"})

        with patch("cloudinary.uploader.destroy", mock_destroy):
            result = CloudinaryAdapter().destroy(public_id="f/x")

        assert result == {"result": "ok"}
        assert mock_destroy.call_args.args == ("f/x",)
        assert mock_destroy.call_args.kwargs["api_secret"] == "test-secret"

    def test_sign_covers_params_and_timestamp(self) -> None:
        adapter = CloudinaryAdapter()

        signature, timestamp = adapter.sign(params={"folder": "direct", "resource_type": "auto"})

        expected = cloudinary.utils.api_sign_request(
            {"folder": "direct", "resource_type": "auto", "timestamp": timestamp},
            "test-secret",
        )
        assert signature == expected
        assert isinstance(timestamp, int)
        assert adapter.cloud_name == "demo-cloud"
        assert adapter.api_key == "123456789012345"
