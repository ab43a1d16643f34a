"""Tests for API request size limits."""

from fastapi.testclient import TestClient

from aggregator.api.main import app


class TestRequestSizeLimits:
    """Request body size limit."""

    def test_oversized_request_returns_413(self):
        """Request with Content-Length exceeding limit returns 413."""
        client = TestClient(app)
        response = client.post(
            "/quote",
            json={"supplyToken": "ACA", "targetToken": "DOT", "amount": "1"},
            headers={"Content-Length": str(2 * 1024 * 1024)},  # 2 MB
        )
        assert response.status_code == 413
        assert response.json()["detail"] == "Request too large"


class TestHealthEndpoint:
    """Health endpoint."""

    def test_health_returns_ok(self):
        """Health endpoint returns ok status."""
        client = TestClient(app)
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
