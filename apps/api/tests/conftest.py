"""Shared fixtures for RecipeScan tests."""
from io import BytesIO

import pytest
from PIL import Image

from services.parser import RecipeParser


@pytest.fixture
def parser():
    """Parser with the default vocabulary."""
    return RecipeParser()


@pytest.fixture
def image_bytes():
    """Small valid PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (40, 20), color="white").save(buffer, format="PNG")
    return buffer.getvalue()
