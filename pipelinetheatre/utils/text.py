import html
import re
import unicodedata
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pipelinetheatre import config

TITLE_SEPARATORS = "—–\\-|:"


def strip_diacritics(text):
    """
    Decompose text (NFD) and drop the combining marks.
    "Théâtre" -> "Theatre". None and non-strings are coerced, never raised on.
    """
    if text is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def norm_key(text):
    """
    Loose equality key: no accents, lowercase, only [a-z0-9] kept.
    "Théâtre Le Public" and "THEATRE-LE-PUBLIC" both give "theatrelepublic".
    """
    key = strip_diacritics(text).lower().strip()
    return re.sub(r"[^a-z0-9]+", "", key)


def decode_html_entities(text):
    """Unescape leftover HTML entities (&amp;, &#8211;, &nbsp;...) in scraped text."""
    if not text:
        return ""
    return html.unescape(str(text)).replace("\xa0", " ")


def _is_tracking_param(name):
    name = name.lower()
    return name in config.TRACKING_PARAMS or name.startswith(config.TRACKING_PREFIXES)


def normalize_url(url):
    """
    Canonicalize a URL for identity purposes.
    - fragment dropped
    - utm_*, fbclid and gclid query parameters removed
    - scheme and host lowercased, empty path becomes "/"
    Anything that does not parse as an absolute URL just loses its fragment.
    """
    if not url:
        return ""
    url = str(url).strip()

    try:
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"not an absolute URL: {url}")
        query = [
            (k, v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
            if not _is_tracking_param(k)
        ]
        return urlunsplit((
            parts.scheme.lower(),
            parts.netloc.lower(),
            parts.path or "/",
            urlencode(query),
            "",
        ))
    except ValueError:
        return url.split("#")[0]


def canonicalize_title(titre, venue_name=None):
    """
    Remove a trailing venue name from a show title and collapse whitespace.

    Listings often render titles as "Hamlet — Théâtre X" or "Hamlet | theatre x".
    The venue is matched verbatim, without accents, and without accents in
    lowercase, after one of the separators — – - | :
    """
    title = decode_html_entities(titre).strip()
    venue = re.sub(r"\s+", " ", decode_html_entities(venue_name)).strip()

    if venue:
        plain = strip_diacritics(venue)
        forms = []
        for form in (venue, plain, plain.lower()):
            if form not in forms:
                forms.append(form)

        for form in forms:
            suffix = re.compile(r"\s*[" + TITLE_SEPARATORS + r"]\s*" + re.escape(form) + r"\s*$")
            stripped = suffix.sub("", title)
            if stripped:
                title = stripped

    return re.sub(r"\s+", " ", title).strip()


def normalize_genre(value):
    """Map a free-text genre onto comedie / drame / autre, or None."""
    if not value:
        return None
    v = strip_diacritics(value).lower().strip()

    if v in config.GENRES:
        return v
    if "com" in v:
        return "comedie"
    if "dram" in v or "trag" in v:
        return "drame"
    if "jeune public" in v or "experimental" in v or "inclassable" in v:
        return "autre"
    return None


def normalize_style(value):
    """Map a free-text style onto classique / contemporain, or None."""
    if not value:
        return None
    v = strip_diacritics(value).lower().strip()

    if v in config.STYLES:
        return v
    if "class" in v:
        return "classique"
    if "contemp" in v or "moderne" in v or "creation" in v:
        return "contemporain"
    return None
