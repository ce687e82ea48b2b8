"""
Text extraction for ICY metadata blocks and "now playing" endpoints

Both functions are pure: they take the decoded text and never touch the network.
"""

import re
from typing import Optional, Tuple

from .models import IcyMetadataBlock

STREAM_TITLE_RE = re.compile(r"StreamTitle='([^']+)'")

# Loose matching on purpose: servers return partial or malformed JSON
JSON_STREAM_TITLE_RE = re.compile(r'"streamtitle"\s*:\s*["\']([^"\']+)["\']', re.IGNORECASE)
JSON_TITLE_RE = re.compile(r'"title"\s*:\s*["\']([^"\']+)["\']', re.IGNORECASE)

# Earliest match wins, alternatives tried in this order at each position
JSON_SEPARATOR_RE = re.compile(r' - | – | — |-')


def parse_icy_metadata(raw: str) -> IcyMetadataBlock:
    """Parse an ICY metadata block such as ``StreamTitle='Artist - Song';``

    A block without a StreamTitle field gives an empty title; the raw text is
    always kept so callers can detect changes.
    """
    block = IcyMetadataBlock(raw_metadata=raw)

    match = STREAM_TITLE_RE.search(raw)
    if not match:
        return block

    block.title = match.group(1)
    if ' - ' in block.title:
        artist, song = block.title.split(' - ', 1)
        block.artist = artist.strip()
        block.song = song.strip()

    return block


def extract_now_playing(text: str) -> Optional[Tuple[str, str]]:
    """Find an (artist, title) pair in a JSON-ish "now playing" response

    Looks for a "streamtitle" field first, then "title". Returns None when
    neither is present.
    """
    match = JSON_STREAM_TITLE_RE.search(text) or JSON_TITLE_RE.search(text)
    if not match:
        return None

    value = match.group(1).strip()
    if not value:
        return None

    parts = JSON_SEPARATOR_RE.split(value, maxsplit=1)
    if len(parts) == 2 and parts[0].strip() and parts[1].strip():
        return parts[0].strip(), parts[1].strip()

    return '', value
