"""
Palette <-> share token, and the share-link helpers around it.

A token is standard base64 over the UTF-8 JSON of the palette's serialized
form. Links carry it in the `palette` query parameter.
"""

import base64
import binascii
import json
import logging
from typing import Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from palette_errors import EmptyPaletteShare, InvalidShareToken
from palette_model import Palette

logger = logging.getLogger(__name__)

SHARE_PARAM = 'palette'
SHARE_FRAGMENT = 'color-palette'


def encode(palette: Palette) -> str:
    """
    Encode a palette as a share token.

    Raises:
        EmptyPaletteShare: If the palette has no colors.
    """
    if palette.total_colors() == 0:
        raise EmptyPaletteShare("Please create a palette to share")
    payload = json.dumps(palette.to_dict(), ensure_ascii=False, separators=(',', ':'))
    return base64.b64encode(payload.encode('utf-8')).decode('ascii')


def decode(token: str) -> Palette:
    """
    Decode a share token into a new palette with fresh ids.

    Raises:
        InvalidShareToken: If the token is not valid base64, UTF-8 or JSON,
            or does not describe a palette.
    """
    try:
        raw = base64.b64decode(token.strip(), validate=True)
        data = json.loads(raw.decode('utf-8'))
        return Palette.from_dict(data)
    except (AttributeError, binascii.Error, RecursionError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Rejected share token: %s", e)
        raise InvalidShareToken("The shared palette link appears to be invalid") from e


# =============================================================================
# Share links
# =============================================================================

def share_url(base_url: str, palette: Palette) -> str:
    """Build a shareable link, replacing any query and fragment on base_url."""
    token = encode(palette)
    parts = urlsplit(base_url)
    query = f"{SHARE_PARAM}={quote(token, safe='')}"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, SHARE_FRAGMENT))


def token_from_url(url: str) -> Optional[str]:
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == SHARE_PARAM:
            return value
    return None


def strip_share_token(url: str) -> str:
    """The same URL without its share parameter."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SHARE_PARAM]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def load_shared(workspace, url: str) -> Optional[str]:
    """
    Load the palette shared in a URL into a workspace.

    Returns:
        The URL with the token removed, or None when the URL carries no token.

    Raises:
        InvalidShareToken: If the token is malformed; the workspace is untouched.
    """
    token = token_from_url(url)
    if token is None:
        return None
    workspace.replace(decode(token))
    return strip_share_token(url)
