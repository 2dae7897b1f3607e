"""Shared fixtures for the self-analysis wizard tests."""
from io import BytesIO

import pytest
from PIL import Image

from core import transitions
from utils import config_loader

QUESTION_STEPS = ("values", "talents", "passion")


@pytest.fixture(autouse=True)
def _fresh_config():
    """Reload config.yaml for every test so config overrides never leak."""
    config_loader.reset_config_cache()
    yield
    config_loader.reset_config_cache()


@pytest.fixture
def override_config(monkeypatch):
    """Overlay nested config values on top of config.yaml (e.g. {"delivery": {"send_email": False}})."""
    def _apply(overrides):
        base = dict(config_loader.get_config())
        for section, values in overrides.items():
            merged = dict(base.get(section) or {})
            merged.update(values)
            base[section] = merged
        monkeypatch.setattr(config_loader, "_config_cache", base)
    return _apply


@pytest.fixture
def choice_order():
    return transitions.build_step_order(QUESTION_STEPS, "choice")


@pytest.fixture
def first_action_order():
    return transitions.build_step_order(QUESTION_STEPS, "first_action")


@pytest.fixture
def named_session(choice_order):
    """A session that has just left the intro screen."""
    return transitions.submit_name(transitions.new_session(), "山田太郎", choice_order)


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), color=(255, 200, 0)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), color=(0, 120, 255)).save(buf, format="JPEG")
    return buf.getvalue()
