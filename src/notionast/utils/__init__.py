from .urls import (
    NOTION_HOST,
    AssetUrlKind,
    classify_asset_url,
    get_block_uri,
    is_valid_dash_id,
    normalize_file_url,
    normalize_image_url,
    to_dash_id,
    to_local_anchor,
    to_no_dash_id,
)

__all__ = [
    "NOTION_HOST",
    "AssetUrlKind",
    "classify_asset_url",
    "get_block_uri",
    "is_valid_dash_id",
    "normalize_file_url",
    "normalize_image_url",
    "to_dash_id",
    "to_local_anchor",
    "to_no_dash_id",
]
