import json

from html_builders import IMAGE_URL, PNG_BYTES, card, page
from serp_artworks import images
from serp_artworks.cli import build_config, main, parse_args
from serp_artworks.config import BrowserKind, ExtractionMode


class TestParseArgs:
    def test_defaults(self):
        config = build_config(parse_args(["page.html"]))
        assert config.mode is ExtractionMode.STRICT
        assert config.browser is BrowserKind.CHROMIUM
        assert config.headless and config.render
        assert config.wait_timeout == 5.0

    def test_flags(self, tmp_path):
        shot = tmp_path / "shot.png"
        args = parse_args(
            [
                "page.html",
                "--mode",
                "lenient",
                "--browser",
                "firefox",
                "--no-headless",
                "--no-render",
                "--wait",
                "2.5",
                "--screenshot",
                str(shot),
                "--dedupe",
                "--min-year",
                "1450",
                "--max-year",
                "1550",
            ]
        )
        config = build_config(args)
        assert config.mode is ExtractionMode.LENIENT
        assert config.browser is BrowserKind.FIREFOX
        assert not config.headless and not config.render
        assert config.wait_timeout == 2.5
        assert config.screenshot_path == shot
        assert config.dedupe
        assert (config.min_year, config.max_year) == (1450, 1550)


class TestMain:
    def test_writes_json_to_stdout(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text(page(card("/search?sca_esv=1", "Sunflowers")), encoding="utf-8")
        assert main([str(path), "--no-render"]) == 0
        document = json.loads(capsys.readouterr().out)
        assert document == {
            "artworks": [
                {
                    "name": "Sunflowers",
                    "link": "https://www.google.com/search?sca_esv=1",
                    "image": "https://example.com/a.jpg",
                }
            ]
        }

    def test_writes_json_to_file(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text(page(card("/search?sca_esv=1", "Irises", "1889")), encoding="utf-8")
        output = tmp_path / "out" / "artworks.json"
        assert main([str(path), "--no-render", "--output", str(output)]) == 0
        document = json.loads(output.read_text(encoding="utf-8"))
        assert document["artworks"][0]["extensions"] == ["1889"]

    def test_missing_file_exit_status(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.html"), "--no-render"]) == 1
        assert capsys.readouterr().out == ""

    def test_images_dir_saves_record_images(self, tmp_path, monkeypatch, capsys):
        class _Response:
            content = PNG_BYTES

            def raise_for_status(self):
                pass

        class _Session:
            def __init__(self):
                self.calls = []

            def get(self, url, timeout):
                self.calls.append(url)
                return _Response()

        session = _Session()
        monkeypatch.setattr(images.requests, "Session", lambda: session)
        path = tmp_path / "page.html"
        path.write_text(page(card("/search?sca_esv=1", "Sunflowers")), encoding="utf-8")
        images_dir = tmp_path / "thumbs"

        assert main([str(path), "--no-render", "--images-dir", str(images_dir)]) == 0
        capsys.readouterr()
        assert session.calls == [IMAGE_URL]
        assert (images_dir / "images" / "01-sunflowers.png").read_bytes() == PNG_BYTES
