"""Unit tests for HTML entity decoding and slug/URL helpers."""

from gundem_feed.services.entities import decode_html_entities, strip_html
from gundem_feed.services.urls import (
    extract_slug,
    resolve_image_url,
    slugify,
    turkish_lower,
    url_host,
    url_origin,
)


class TestDecodeHtmlEntities:
    """Tests for decode_html_entities."""

    def test_plain_text_is_unchanged_but_trimmed(self):
        assert decode_html_entities("  Karasu sahilinde yeni dönem  ") == "Karasu sahilinde yeni dönem"

    def test_none_and_empty(self):
        assert decode_html_entities(None) == ""
        assert decode_html_entities("") == ""

    def test_named_entities(self):
        assert decode_html_entities("Tom &amp; Jerry &ndash; &ldquo;Yaz&rdquo;&hellip;") == "Tom & Jerry – “Yaz”…"

    def test_decimal_and_hex_entities(self):
        assert decode_html_entities("Karasu&#8217;da") == "Karasu’da"
        assert decode_html_entities("Kocaal&#x131;") == "Kocaalı"
        assert decode_html_entities("Kocaal&#X131;") == "Kocaalı"

    def test_double_encoded_entity(self):
        assert decode_html_entities("Karasu&amp;amp;#8217;da") == "Karasu’da"

    def test_nesting_beyond_pass_cap_terminates(self):
        text = "&" + "amp;" * 8 + "lt;"

        result = decode_html_entities(text)

        # Each pass peels one level; five passes leave three
        assert result == "&" + "amp;" * 3 + "lt;"

    def test_malformed_numeric_entity_left_untouched(self):
        assert decode_html_entities("x &#99999999999; y") == "x &#99999999999; y"
        assert decode_html_entities("x &#x110000; y") == "x &#x110000; y"

    def test_nbsp_becomes_space(self):
        assert decode_html_entities("3+1&nbsp;daire") == "3+1 daire"


class TestStripHtml:
    """Tests for strip_html."""

    def test_removes_tags_then_decodes(self):
        assert strip_html("<p>Satılık &amp; <b>kiralık</b></p>") == "Satılık & kiralık"

    def test_empty(self):
        assert strip_html(None) == ""
        assert strip_html("") == ""


class TestExtractSlug:
    """Tests for slug derivation."""

    def test_last_path_segment(self):
        url = "https://karasugundem.com/haber/yeni-emlak-projesi-123"
        assert extract_slug(url) == "yeni-emlak-projesi-123"

    def test_trailing_slash_and_query_ignored(self):
        assert extract_slug("https://karasugundem.com/haber/sahil-yolu/?utm_source=rss") == "sahil-yolu"

    def test_is_deterministic(self):
        url = "https://karasugundem.com/haber/liman-projesi"
        assert {extract_slug(url) for _ in range(5)} == {"liman-projesi"}

    def test_non_url_falls_back_to_split(self):
        assert extract_slug("haber/yerel/belediye-karari") == "belediye-karari"

    def test_fallback_literal(self):
        assert extract_slug("https://karasugundem.com/") == "article"
        assert extract_slug("") == "article"


class TestUrlHelpers:
    """Tests for the smaller URL helpers."""

    def test_resolve_protocol_relative(self):
        assert resolve_image_url("//cdn.example.com/a.jpg", "http://x.com/p") == "https://cdn.example.com/a.jpg"

    def test_resolve_root_relative_against_article_origin(self):
        link = "https://karasugundem.com/haber/x"
        assert resolve_image_url("/uploads/a.jpg", link) == "https://karasugundem.com/uploads/a.jpg"

    def test_resolve_root_relative_without_origin_kept(self):
        assert resolve_image_url("/uploads/a.jpg", "not a url") == "/uploads/a.jpg"

    def test_other_relative_kept(self):
        assert resolve_image_url("uploads/a.jpg", "https://karasugundem.com/x") == "uploads/a.jpg"

    def test_slugify_turkish(self):
        assert slugify("Yalı Mahallesi") == "yali-mahallesi"
        assert slugify("Çataltepe") == "cataltepe"

    def test_turkish_lower_dotted_capital_i(self):
        assert turkish_lower("İnköy") == "inköy"

    def test_url_host_ignores_www(self):
        assert url_host("https://www.karasuemlak.com/x") == "karasuemlak.com"

    def test_url_origin(self):
        assert url_origin("https://karasugundem.com/haber/x?a=1") == "https://karasugundem.com"
        assert url_origin("haber/x") is None


class TestMalformedLinks:
    """Links urlparse rejects, such as an unclosed IPv6 bracket."""

    BAD_LINK = "http://[karasugundem.com/haber/yeni-proje"

    def test_slug_from_split(self):
        assert extract_slug(self.BAD_LINK) == "yeni-proje"

    def test_no_host_or_origin(self):
        assert url_host(self.BAD_LINK) == ""
        assert url_origin(self.BAD_LINK) is None

    def test_root_relative_image_kept(self):
        assert resolve_image_url("/uploads/a.jpg", self.BAD_LINK) == "/uploads/a.jpg"
