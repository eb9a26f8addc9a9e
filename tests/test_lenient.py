from html_builders import OTHER_PNG_DATA_URI, PNG_DATA_URI
from serp_artworks.config import ExtractorConfig
from serp_artworks.lenient import (
    backfill_images,
    candidate_containers,
    extract_artworks,
    extract_extensions,
    find_inline_image,
)
from serp_artworks.models import ArtworkRecord


def _carousel(*items: str, title: str = "Van Gogh paintings - Google Search") -> str:
    body = "".join(f'<div role="listitem">{item}</div>' for item in items)
    return (
        f"<html><head><title>{title}</title></head>"
        f'<body><div role="list">{body}</div></body></html>'
    )


def _run(soup_from, html, **overrides):
    config = ExtractorConfig(**overrides)
    return extract_artworks(soup_from(html), config, markup=html)


class TestCandidateContainers:
    def test_unique_and_card_selectors_first(self, soup_from):
        soup = soup_from(_carousel('<a href="/search?q=a">A work</a>', '<a href="/search?q=b">B work</a>'))
        containers = candidate_containers(soup)
        assert len({id(node) for node in containers}) == len(containers)
        assert [node.get("role") for node in containers[:2]] == ["listitem", "listitem"]
        assert containers[-1].name == "a"


class TestExtractExtensions:
    def test_trailing_year_then_chips_capped_at_two(self, soup_from):
        node = soup_from("<div><span>1700</span><span>1885</span><div>1886</div><span>1887</span></div>").div
        assert extract_extensions("Potato Eaters 1885", node, 1800, 1950) == ("1885", "1886")

    def test_skips_long_and_out_of_range_text(self, soup_from):
        node = soup_from("<div><span>painted 1889</span><span>2024</span><span>1890</span></div>").div
        assert extract_extensions("Wheatfield", node, 1800, 1950) == ("1890",)

    def test_year_range_is_configurable(self, soup_from):
        node = soup_from("<div><span>1503</span></div>").div
        assert extract_extensions("Mona Lisa", node, 1450, 1550) == ("1503",)


class TestFindInlineImage:
    def test_src_preferred(self, soup_from):
        node = soup_from(f'<div><img data-src="{OTHER_PNG_DATA_URI}"><img src="{PNG_DATA_URI}"></div>').div
        assert find_inline_image(node) == PNG_DATA_URI

    def test_lazy_source_fallback(self, soup_from):
        node = soup_from(f'<div><img src="https://x/y.jpg" data-src="{PNG_DATA_URI}"></div>').div
        assert find_inline_image(node) == PNG_DATA_URI

    def test_srcset_first_token(self, soup_from):
        node = soup_from(
            f'<div><img srcset="{PNG_DATA_URI} 1x, {OTHER_PNG_DATA_URI} 2x" '
            f'data-srcset="https://x/y.jpg 1x"></div>'
        ).div
        assert find_inline_image(node) == PNG_DATA_URI

    def test_short_placeholder_ignored(self, soup_from):
        node = soup_from('<div><img src="data:image/gif;base64,R0lGOD"></div>').div
        assert find_inline_image(node) is None


class TestExtractArtworks:
    def test_names_years_images_and_sorting(self, soup_from):
        html = _carousel(
            f'<a href="/search?q=Starry+Night">The Starry Night 1889</a><img src="{PNG_DATA_URI}">',
            '<a href="/search?q=Sunflowers">Sunflowers</a><span>1888</span>',
            '<a href="/search?q=images">Images</a>',
        )
        records = _run(soup_from, html)
        assert [record.name for record in records] == ["Sunflowers", "The Starry Night"]
        sunflowers, starry = records
        assert starry.link == "https://www.google.com/search?q=Starry+Night"
        assert starry.extensions == ("1889",)
        assert starry.image == PNG_DATA_URI
        assert sunflowers.extensions == ("1888",)

    def test_extensions_key_always_present(self, soup_from):
        html = _carousel('<a href="/search?q=Irises">Irises</a>')
        assert _run(soup_from, html)[0].to_dict()["extensions"] == []

    def test_duplicates_collapse_to_first_occurrence(self, soup_from):
        html = _carousel(
            '<a href="/search?q=Irises">Irises</a><span>1889</span>',
            '<a href="/search?q=Irises">Irises</a><span>1890</span>',
        )
        records = _run(soup_from, html)
        assert len(records) == 1
        assert records[0].extensions == ("1889",)

    def test_same_name_different_link_kept_in_scan_order(self, soup_from):
        html = _carousel(
            '<a href="/search?q=Self-Portrait+1887">Self-Portrait</a>',
            '<a href="/search?q=Self-Portrait+1889">Self-Portrait</a>',
        )
        links = [record.link for record in _run(soup_from, html)]
        assert links == [
            "https://www.google.com/search?q=Self-Portrait+1887",
            "https://www.google.com/search?q=Self-Portrait+1889",
        ]

    def test_implausible_names_dropped_unless_dated(self, soup_from):
        html = _carousel(
            '<a href="/search?q=more">More</a>',
            '<a href="/search?q=42">42</a>',
            '<a href="/search?q=sale">Van Gogh prints for sale</a>',
            '<a href="/search?q=theo">Theo van Gogh</a><span>1857</span>',
        )
        assert [record.name for record in _run(soup_from, html)] == ["Theo van Gogh"]

    def test_year_only_anchor_text_is_skipped(self, soup_from):
        html = _carousel('<a href="/search?q=1889">1889</a>')
        assert _run(soup_from, html) == []

    def test_absolute_search_links_not_prefixed(self, soup_from):
        html = _carousel('<a href="https://www.google.com/search?q=Irises">Irises</a>')
        assert _run(soup_from, html)[0].link == "https://www.google.com/search?q=Irises"

    def test_backfill_from_script_blob(self, soup_from):
        html = _carousel('<a href="/search?q=Irises">Irises</a>').replace(
            "</body>", f"<script>var thumbs = ['{OTHER_PNG_DATA_URI}'];</script></body>"
        )
        assert _run(soup_from, html)[0].image == OTHER_PNG_DATA_URI

    def test_no_markup_means_no_backfill(self, soup_from):
        html = _carousel('<a href="/search?q=Irises">Irises</a>') + f"<!-- {PNG_DATA_URI} -->"
        records = extract_artworks(soup_from(html), ExtractorConfig())
        assert records[0].image == ""

    def test_repeatable(self, soup_from):
        html = _carousel(
            '<a href="/search?q=b">Bedroom in Arles</a>',
            '<a href="/search?q=a">Almond Blossoms</a>',
        )
        soup = soup_from(html)
        assert extract_artworks(soup, ExtractorConfig(), html) == extract_artworks(soup, ExtractorConfig(), html)


class TestBackfillImages:
    def test_fills_in_order_without_reuse(self):
        records = [
            ArtworkRecord("A", "l/a", "", ()),
            ArtworkRecord("B", "l/b", PNG_DATA_URI, ()),
            ArtworkRecord("C", "l/c", "", ()),
            ArtworkRecord("D", "l/d", "", ()),
        ]
        markup = f"{PNG_DATA_URI} {OTHER_PNG_DATA_URI} {OTHER_PNG_DATA_URI}"
        filled = backfill_images(records, markup)
        assert [record.image for record in filled] == [OTHER_PNG_DATA_URI, PNG_DATA_URI, "", ""]

    def test_existing_images_untouched(self):
        records = [ArtworkRecord("A", "l/a", "https://x/a.jpg", ())]
        assert backfill_images(records, PNG_DATA_URI) == records
