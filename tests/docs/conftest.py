"""Fixtures for docs index tests."""

from __future__ import annotations

from typing import Any

import pytest

from feathers_docs.config.models import DocsServerConfig
from feathers_docs.docs.index import DocsIndex


@pytest.fixture
def index(config: DocsServerConfig, fake_sync: Any) -> DocsIndex:
    return DocsIndex(config, fake_sync)
