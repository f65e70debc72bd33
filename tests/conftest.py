from __future__ import annotations

import pytest

from campusnav.config import load_default_catalog
from campusnav.scheduler import ManualTickSource


@pytest.fixture
def catalog():
    return load_default_catalog()


@pytest.fixture
def ticks():
    return ManualTickSource()
