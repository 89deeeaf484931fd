"""共通フィクスチャ."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture():
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def fake_playwright():
    """sync_playwright の代わりになるファクトリと page/browser を作る関数."""

    def _make(html: str = "", **page_errors):
        page = MagicMock()
        page.content.return_value = html
        for method, error in page_errors.items():
            getattr(page, method).side_effect = error

        browser = MagicMock()
        browser.new_page.return_value = page

        pw = MagicMock()
        pw.chromium.launch.return_value = browser

        factory = MagicMock()
        factory.return_value.__enter__.return_value = pw
        factory.return_value.__exit__.return_value = False
        return factory, pw, browser, page

    return _make
