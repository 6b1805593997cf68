"""API endpoint tests."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from zapnote.core.config import Config, ExtractionConfig
from zapnote.dependencies import get_config, get_extraction_router, get_minutes_service
from zapnote.extraction import create_default_router
from zapnote.main import app
from zapnote.minutes import MinutesGenerationError, build_fallback_document

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def test_config(tmp_path):
    """Config with a 1MB upload limit."""
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  max_upload_mb: 1\n")
    return Config(str(path))


@pytest.fixture
def mock_minutes_service():
    """Mock minutes service."""
    service = MagicMock()
    service.generate = AsyncMock(return_value=build_fallback_document("Team agreed to ship."))
    service.answer_question = AsyncMock(return_value="Carol owns the release notes.")
    return service


@pytest.fixture
def client(test_config, mock_minutes_service):
    """Test client with dependencies overridden."""
    router = create_default_router(ExtractionConfig())
    app.dependency_overrides[get_config] = lambda: test_config
    app.dependency_overrides[get_extraction_router] = lambda: router
    app.dependency_overrides[get_minutes_service] = lambda: mock_minutes_service
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Health
# ============================================================================

class TestHealth:
    """Tests for the health endpoint."""

    def test_health_check(self, client):
        """Health endpoint reports status and version."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


# ============================================================================
# File Extraction
# ============================================================================

class TestExtractEndpoint:
    """Tests for POST /api/files/extract."""

    def test_extract_text_file(self, client):
        """A plain text transcript is returned."""
        files = {"file": ("standup.txt", b"Alice: yesterday I fixed the login bug.", "text/plain")}

        response = client.post("/api/files/extract", files=files)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["text"] == "Alice: yesterday I fixed the login bug."
        assert data["extractor"] == "TextExtractor"
        assert data["failure_reason"] is None

    def test_extract_pdf(self, client, text_pdf):
        """PDF uploads report the page count."""
        files = {"file": ("hello.pdf", text_pdf, "application/pdf")}

        response = client.post("/api/files/extract", files=files)

        data = response.json()
        assert data["success"] is True
        assert data["page_count"] == 5
        assert "Hello" in data["text"]

    def test_extract_docx_with_generic_mimetype(self, client, transcript_docx):
        """Browsers sending octet-stream still get DOCX handling by suffix."""
        files = {"file": ("plan.docx", transcript_docx, "application/octet-stream")}

        response = client.post("/api/files/extract", files=files)

        data = response.json()
        assert data["success"] is True
        assert data["extractor"] == "DOCXExtractor"

    def test_extraction_failure_is_200(self, client, image_pdf):
        """Failures are data, with a user-facing message."""
        files = {"file": ("scan.pdf", image_pdf, "application/pdf")}

        response = client.post("/api/files/extract", files=files)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["failure_reason"] == "no_extractable_text"
        assert "image-based" in data["message"]
        assert data["text"] == ""

    def test_unsupported_type(self, client):
        """Images are reported as unsupported."""
        files = {"file": ("photo.png", b"\x89PNG\r\n\x1a\n", "image/png")}

        response = client.post("/api/files/extract", files=files)

        assert response.json()["failure_reason"] == "unsupported_format"

    def test_empty_file_rejected(self, client):
        """Zero-byte uploads are a client error."""
        files = {"file": ("empty.txt", b"", "text/plain")}

        response = client.post("/api/files/extract", files=files)

        assert response.status_code == 400

    def test_oversized_file_rejected(self, client):
        """Uploads over the configured limit are refused."""
        files = {"file": ("big.txt", b"a" * (1024 * 1024 + 1), "text/plain")}

        response = client.post("/api/files/extract", files=files)

        assert response.status_code == 413
        assert "1MB" in response.json()["detail"]

    def test_missing_file_field(self, client):
        """The multipart field is required."""
        response = client.post("/api/files/extract")

        assert response.status_code == 422


# ============================================================================
# Minutes
# ============================================================================

class TestMinutesEndpoints:
    """Tests for /api/minutes."""

    def test_generate_minutes(self, client, mock_minutes_service):
        """Generated minutes are returned in all three views."""
        response = client.post("/api/minutes/generate", json={"transcript": "Alice: ship it."})

        assert response.status_code == 200
        data = response.json()
        assert data["minutes_json"]["title"] == "Generated Meeting Notes"
        assert "minutes_html" in data
        assert data["minutes_table"][0]["speaker"] == "Various"
        mock_minutes_service.generate.assert_awaited_once_with("Alice: ship it.")

    def test_generate_requires_transcript(self, client, mock_minutes_service):
        """Blank transcripts are rejected before calling the model."""
        response = client.post("/api/minutes/generate", json={"transcript": "  "})

        assert response.status_code == 400
        mock_minutes_service.generate.assert_not_called()

    def test_generate_llm_failure(self, client, mock_minutes_service):
        """Model failures map to 502."""
        mock_minutes_service.generate.side_effect = MinutesGenerationError("LLM request failed: timeout")

        response = client.post("/api/minutes/generate", json={"transcript": "Alice: ship it."})

        assert response.status_code == 502
        assert "timeout" in response.json()["detail"]

    def test_ask_question(self, client, mock_minutes_service):
        """Answers are wrapped in an object."""
        response = client.post(
            "/api/minutes/ask",
            json={"question": "Who writes the notes?", "context": "Carol: I will."},
        )

        assert response.status_code == 200
        assert response.json() == {"answer": "Carol owns the release notes."}
        mock_minutes_service.answer_question.assert_awaited_once_with(
            "Who writes the notes?", "Carol: I will."
        )

    def test_ask_requires_question(self, client):
        """Blank questions are a client error."""
        response = client.post("/api/minutes/ask", json={"question": ""})

        assert response.status_code == 400

    def test_ask_llm_failure(self, client, mock_minutes_service):
        """Model failures map to 502."""
        mock_minutes_service.answer_question.side_effect = MinutesGenerationError("LLM returned an empty response")

        response = client.post("/api/minutes/ask", json={"question": "Anything?"})

        assert response.status_code == 502
