"""Tests for the OpenAI vision image service."""
from unittest.mock import Mock, patch

from openai import OpenAIError

from services import image_service


def _client_returning(url):
    client = Mock()
    client.images.generate.return_value = Mock(data=[Mock(url=url)])
    return client


class TestGenerateVisionImage:

    def test_success_returns_url(self):
        client = _client_returning("https://images.example.com/a.png")
        with patch.object(image_service, "get_openai_client", return_value=client):
            result = image_service.generate_vision_image("A bright future")
        assert result == {"image_url": "https://images.example.com/a.png"}

    def test_request_uses_configured_model_and_wrapped_prompt(self):
        client = _client_returning("https://images.example.com/a.png")
        with patch.object(image_service, "get_openai_client", return_value=client):
            image_service.generate_vision_image("A bright future")
        kwargs = client.images.generate.call_args.kwargs
        assert kwargs["model"] == "dall-e-3"
        assert kwargs["size"] == "1024x1024"
        assert kwargs["quality"] == "standard"
        assert kwargs["n"] == 1
        assert "high school student's dream and future vision: A bright future." in kwargs["prompt"]

    def test_api_error_returns_error(self):
        client = Mock()
        client.images.generate.side_effect = OpenAIError("rate limited")
        with patch.object(image_service, "get_openai_client", return_value=client):
            result = image_service.generate_vision_image("A bright future")
        assert result == {"error": image_service.IMAGE_FAILED_MESSAGE}

    def test_missing_url_returns_error(self):
        client = _client_returning(None)
        with patch.object(image_service, "get_openai_client", return_value=client):
            result = image_service.generate_vision_image("A bright future")
        assert "error" in result

    def test_blank_prompt_makes_no_request(self):
        with patch.object(image_service, "get_openai_client") as mock_client:
            result = image_service.generate_vision_image("   ")
        assert "error" in result
        mock_client.assert_not_called()
