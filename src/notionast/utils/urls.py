"""Block ids and asset URLs.

Notion hands out three kinds of asset references:

* **signed** — files in the service's secure S3 bucket.  The raw URL
  expires, so it is rewritten to the service's ``/signed/`` proxy, which
  needs the owning block id to authorize the request.
* **relative** — ``/image/...`` or ``/images/...`` paths served by the
  service itself.
* **absolute** — any other URL, used as is.

Ids come in dash form (``8-4-4-4-12``) and no-dash form (32 characters);
:func:`to_dash_id` and :func:`to_no_dash_id` convert between them.
"""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import quote

NOTION_HOST = "https://www.notion.so"

DASH_ID_LENGTH = len("0eeee000-cccc-bbbb-aaaa-123450000000")
NO_DASH_ID_LENGTH = len("0eeee000ccccbbbbaaaa123450000000")

_SECURE_URL_RE = re.compile(
    r"^https://s3.+\.amazonaws\.com/secure.notion-static.com/"
)
_RELATIVE_PATH_RE = re.compile(r"^/images?/")
_HASH_LINK_RE = re.compile(r"https://www.notion.so/.+#([\da-f]+)")

# Legacy bucket host spelling accepted by the signing proxy.
_HOST_ALIAS = ("s3.us-west", "s3-us-west")

# Mark characters left literal by the signing proxy's encoding.
_URI_COMPONENT_SAFE = "!~*'()"


class AssetUrlKind(str, Enum):
    """Classification of an asset reference."""

    SIGNED = "signed"
    RELATIVE = "relative"
    ABSOLUTE = "absolute"


# ---------------------------------------------------------------------------
# Ids
# ---------------------------------------------------------------------------

def is_valid_dash_id(value: str) -> bool:
    """Return ``True`` for 36-character strings that contain a dash.

    This is a shape check, not UUID validation.
    """
    return len(value) == DASH_ID_LENGTH and "-" in value


def to_dash_id(value: str) -> str:
    """Convert a 32-character no-dash id to ``8-4-4-4-12`` form.

    Strings that are already valid dash ids, or that are not 32 characters
    long once dashes are removed, are returned unchanged.
    """
    if is_valid_dash_id(value):
        return value
    bare = value.replace("-", "")
    if len(bare) != NO_DASH_ID_LENGTH:
        return value
    return (
        f"{bare[0:8]}-{bare[8:12]}-{bare[12:16]}-"
        f"{bare[16:20]}-{bare[20:]}"
    )


def to_no_dash_id(value: str) -> str:
    return value.replace("-", "")


def get_block_uri(block_id: str) -> str:
    """Public URL of a block or page."""
    return f"{NOTION_HOST}/{to_no_dash_id(block_id)}"


# ---------------------------------------------------------------------------
# Asset URLs
# ---------------------------------------------------------------------------

def classify_asset_url(url: str) -> AssetUrlKind:
    if _SECURE_URL_RE.match(url):
        return AssetUrlKind.SIGNED
    if _RELATIVE_PATH_RE.match(url):
        return AssetUrlKind.RELATIVE
    return AssetUrlKind.ABSOLUTE


def _signed_base(url: str) -> str:
    clean_url = url.split("?", 1)[0].replace(*_HOST_ALIAS)
    return f"{NOTION_HOST}/signed/{quote(clean_url, safe=_URI_COMPONENT_SAFE)}"


def normalize_image_url(block_id: str, url: str, width: int | None = None) -> str:
    """Convert an image source to a publicly reachable URL.

    Parameters
    ----------
    block_id:
        Id of the block that owns the image.  The signing proxy needs it.
    url:
        Raw image source.
    width:
        Optional width hint, only forwarded to the signing proxy.

    Returns
    -------
    str
        ``https://www.notion.so/signed/<encoded>?[width=W&]table=block&id=ID``
        for signed URLs, the host-prefixed path for relative ones, and
        *url* unchanged otherwise.
    """
    kind = classify_asset_url(url)
    if kind is AssetUrlKind.SIGNED:
        query: list[str] = []
        if width:
            query.append(f"width={width}")
        query.append(f"table=block&id={block_id}")
        return f"{_signed_base(url)}?{'&'.join(query)}"
    if kind is AssetUrlKind.RELATIVE:
        return f"{NOTION_HOST}{url}"
    return url


def normalize_file_url(block_id: str, url: str) -> str:
    """Convert a file source to a publicly reachable URL.

    Only signed URLs are rewritten; everything else passes through.
    """
    if classify_asset_url(url) is AssetUrlKind.SIGNED:
        return f"{_signed_base(url)}?table=block&id={block_id}"
    return url


def to_local_anchor(url: str) -> str:
    """Rewrite a link to a block of a Notion page into a local ``#anchor``.

    ``https://www.notion.so/Page-0123#4567...`` becomes ``#4567...`` (no-dash
    form).  Anything else is returned unchanged.
    """
    found = _HASH_LINK_RE.search(url)
    if found is not None:
        return "#" + to_no_dash_id(found.group(1))
    return url
