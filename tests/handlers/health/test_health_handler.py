import json

from handlers.health.handler import handler
from handlers.health.service import health_status


class TestHealthStatus:
    def test_healthy_when_configured(self) -> None:
        status = health_status()

        assert status["status"] == "healthy"
        assert status["message"] == "Image Catalog API"
        assert status["version"] == "1.0.0"
        assert all(status["environment"].values())

    def test_reports_missing_variables(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGO_URI")

        status = health_status()

        assert status["status"] == "missing_env_vars"
        assert status["environment"]["MONGO_URI"] is False
        assert status["environment"]["CLOUDINARY_API_KEY"] is True


class TestHealthHandler:
    def test_get(self, lambda_context) -> None:
        response = handler({"httpMethod": "GET", "path": "/health", "headers": {}}, lambda_context)
        body = json.loads(response["body"])

        assert response["statusCode"] == 200
        assert body["status"] == "healthy"
        assert "timestamp" in body

    def test_answers_without_backends(self, lambda_context, monkeypatch) -> None:
        monkeypatch.setenv("MONGO_URI", "mongodb://unreachable.invalid:1")

        response = handler({"httpMethod": "GET", "headers": {}}, lambda_context)

        assert response["statusCode"] == 200
