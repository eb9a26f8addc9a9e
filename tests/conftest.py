import pytest
from bs4 import BeautifulSoup


@pytest.fixture
def soup_from():
    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    return _parse
