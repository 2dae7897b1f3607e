"""Tests for image download and format detection helpers."""
from unittest.mock import Mock, patch

import requests

from utils import image_utils


class TestDetectImageFormat:

    def test_png(self, png_bytes):
        assert image_utils.detect_image_format(png_bytes) == ("image/png", "png")

    def test_jpeg(self, jpeg_bytes):
        assert image_utils.detect_image_format(jpeg_bytes) == ("image/jpeg", "jpg")

    def test_unrecognized_bytes_default_to_png(self):
        assert image_utils.detect_image_format(b"not an image") == ("image/png", "png")


class TestDownloadImageBytes:

    def test_success(self):
        response = Mock(status_code=200, content=b"data")
        with patch.object(image_utils.requests, "get", return_value=response) as mock_get:
            assert image_utils.download_image_bytes("https://images.example.com/a.png", timeout=5) == b"data"
        mock_get.assert_called_once_with("https://images.example.com/a.png", timeout=5)

    def test_non_200_returns_none(self):
        response = Mock(status_code=403, content=b"")
        with patch.object(image_utils.requests, "get", return_value=response):
            assert image_utils.download_image_bytes("https://images.example.com/a.png") is None

    def test_request_exception_returns_none(self):
        with patch.object(image_utils.requests, "get", side_effect=requests.ConnectionError("down")):
            assert image_utils.download_image_bytes("https://images.example.com/a.png") is None

    def test_empty_url(self):
        assert image_utils.download_image_bytes("") is None
