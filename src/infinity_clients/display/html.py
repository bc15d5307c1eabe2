"""Convert HTML email bodies to plain display text."""

from __future__ import annotations

import re


def html_to_text(html: str) -> str:
    """Strip markup, scripts and styles; collapse whitespace."""
    if not html:
        return ""
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        raise ImportError(
            "beautifulsoup4 is required for HTML bodies. "
            "Install with: pip install infinity-clients[html]"
        )

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()
