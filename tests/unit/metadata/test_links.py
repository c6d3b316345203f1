"""Tests for note link extraction."""

from tagnav.metadata.links import id_key, scan_links, title_key


class TestScanLinks:
    """Tests for scan_links."""

    def test_id_and_wiki_links(self):
        links = scan_links("see [x](:/ABC123) and [[My Note]]\nplain\n[[Other]]")

        assert links == {
            "id:abc123": {0},
            "title:my note": {0},
            "title:other": {2},
        }

    def test_wiki_link_alias_and_section(self):
        links = scan_links("[[Note|alias]]\n[[Note#Section]]")

        assert links == {"title:note": {0, 1}}

    def test_id_link_with_anchor(self):
        assert scan_links("[x](:/abc#part)") == {"id:abc": {0}}

    def test_external_links_ignored(self):
        assert scan_links("[x](https://example.com) [y](other.md)") == {}

    def test_code_blocks(self):
        text = "```\n[[Hidden]]\n```\n[[Shown]]"

        assert scan_links(text) == {"title:shown": {3}}
        assert scan_links(text, ignore_code_blocks=False) == {
            "title:hidden": {1},
            "title:shown": {3},
        }

    def test_keys(self):
        assert id_key("AbC") == "id:abc"
        assert title_key("  My Note ") == "title:my note"
