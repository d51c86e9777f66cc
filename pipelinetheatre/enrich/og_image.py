from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from pipelinetheatre import config

PREVIEW_META = [
    ("property", "og:image"),
    ("property", "og:image:url"),
    ("name", "twitter:image"),
    ("property", "twitter:image"),
]


def extract_preview_image(html, page_url=None):
    """
    Return the Open Graph / Twitter card image declared in a page, made
    absolute against page_url. None when the page declares none.
    """
    soup = BeautifulSoup(html, "html.parser")
    for attr, value in PREVIEW_META:
        tag = soup.find("meta", attrs={attr: value})
        content = tag.get("content", "").strip() if tag else ""
        if content:
            return urljoin(page_url, content) if page_url else content
    return None


def fetch_preview_image(page_url, timeout=None, session=None):
    """
    Fetch a page and return its preview image URL.
    Best effort: any network error, non-200 status or missing tag gives None.
    """
    if not page_url or not str(page_url).startswith(("http://", "https://")):
        return None

    http = session or requests
    try:
        r = http.get(page_url, headers=config.HTTP_HEADERS, timeout=timeout or config.HTTP_TIMEOUT)
        if r.status_code != 200:
            return None
        return extract_preview_image(r.text, r.url or page_url)
    except requests.exceptions.RequestException:
        return None
