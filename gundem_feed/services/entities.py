"""HTML entity decoding.

Feed text is frequently double (or triple) encoded, e.g. ``&amp;#8217;``.
Decoding runs the full substitution pass repeatedly until the text stops
changing, capped at MAX_DECODE_PASSES.
"""

import re
from typing import Optional


MAX_DECODE_PASSES = 5

# &amp; comes first so one pass peels exactly one level of escaping from it.
NAMED_ENTITIES = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    ("&ndash;", "–"),
    ("&mdash;", "—"),
    ("&lsquo;", "‘"),
    ("&rsquo;", "’"),
    ("&sbquo;", "‚"),
    ("&ldquo;", "“"),
    ("&rdquo;", "”"),
    ("&bdquo;", "„"),
    ("&laquo;", "«"),
    ("&raquo;", "»"),
    ("&hellip;", "…"),
    ("&bull;", "•"),
    ("&middot;", "·"),
    ("&trade;", "™"),
    ("&copy;", "©"),
    ("&reg;", "®"),
    ("&deg;", "°"),
    ("&euro;", "€"),
    ("&ccedil;", "ç"),
    ("&Ccedil;", "Ç"),
    ("&ouml;", "ö"),
    ("&Ouml;", "Ö"),
    ("&uuml;", "ü"),
    ("&Uuml;", "Ü"),
]

_DECIMAL_ENTITY = re.compile(r"&#(\d+);")
_HEX_ENTITY = re.compile(r"&#[xX]([0-9a-fA-F]+);")
_TAG = re.compile(r"<[^>]*>")


def _decode_numeric(match: "re.Match", base: int) -> str:
    try:
        return chr(int(match.group(1), base))
    except (ValueError, OverflowError):
        return match.group(0)


def _decode_pass(text: str) -> str:
    for entity, replacement in NAMED_ENTITIES:
        text = text.replace(entity, replacement)
    text = _DECIMAL_ENTITY.sub(lambda m: _decode_numeric(m, 10), text)
    text = _HEX_ENTITY.sub(lambda m: _decode_numeric(m, 16), text)
    return text


def decode_html_entities(text: Optional[str]) -> str:
    """Decode named, decimal and hexadecimal HTML entities.

    Args:
        text: Escaped text, possibly nested-encoded. None is treated as empty.

    Returns:
        Decoded, trimmed text
    """
    if not text:
        return ""

    decoded = text
    for _ in range(MAX_DECODE_PASSES):
        next_pass = _decode_pass(decoded)
        if next_pass == decoded:
            break
        decoded = next_pass

    return decoded.strip()


def strip_html(html: Optional[str]) -> str:
    """Remove tags from an HTML fragment and decode its entities."""
    if not html:
        return ""
    return decode_html_entities(_TAG.sub("", html).strip())
