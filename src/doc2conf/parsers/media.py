#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/media.py
"""Image and file-import handling shared by the block builders.

Images become ``mediaSingle`` > ``media`` nodes. When upload is enabled and
an uploader is supplied, local images are stored first and referenced by
asset id; any upload failure falls back to the external reference. Images
whose target is a ``.csv`` file are tabular imports instead.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping, Optional

from doc2conf.adf.nodes import Media, MediaSingle, Table
from doc2conf.constants import DEFAULT_MEDIA_LAYOUT, MEDIA_FILE_COLLECTION
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.parsers.csv import CsvToAdfConverter
from doc2conf.uploads import AssetUploader, UploadResult

logger = logging.getLogger(__name__)

CSV_IMPORT_PATTERN = re.compile(r"!\[csv\]\((.*?)\)")
_REMOTE_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://|^data:")


def is_csv_target(target: str) -> bool:
    return target.lower().split("?", 1)[0].endswith(".csv")


def is_remote(target: str) -> bool:
    return bool(_REMOTE_PATTERN.match(target))


def _upload_reference(result: Any, path: Path) -> tuple[str, str]:
    """Extract (id, file name) from an uploader result object or mapping."""
    if isinstance(result, UploadResult):
        return result.id, result.file_name or path.name
    if isinstance(result, Mapping) and result.get("id"):
        return str(result["id"]), str(result.get("file_name") or result.get("title") or path.name)
    raise TypeError(f"Uploader returned {type(result).__name__}, expected UploadResult")


class MediaBuilder:
    """Build media nodes and tabular imports for one conversion call.

    Parameters
    ----------
    options : ConversionOptions
        Upload flag, space key and base path
    uploader : AssetUploader or None
        Asset store used when ``options.upload_images`` is set

    """

    def __init__(self, options: ConversionOptions, uploader: Optional[AssetUploader] = None) -> None:
        self.options = options
        self.uploader = uploader

    def build_image(self, alt: str, src: str) -> MediaSingle:
        """Build an image reference, uploading local files when enabled."""
        if self.options.upload_images and self.uploader is not None and not is_remote(src):
            path = self.options.resolve_path(src)
            try:
                result = self.uploader.upload(self.options.space_key, path)
                asset_id, file_name = _upload_reference(result, path)
            except Exception as e:
                logger.warning(f"Image upload failed for {src}, using external reference: {e}")
            else:
                logger.debug(f"Uploaded image {src} as asset {asset_id}")
                media = Media(
                    media_type="file",
                    id=asset_id,
                    collection=MEDIA_FILE_COLLECTION,
                    alt=alt,
                    file_name=file_name,
                )
                return MediaSingle(content=[media], layout=DEFAULT_MEDIA_LAYOUT)
        elif self.options.upload_images and self.uploader is None:
            logger.debug("Image upload requested but no uploader supplied")

        return MediaSingle(content=[Media(media_type="external", url=src, alt=alt)], layout=DEFAULT_MEDIA_LAYOUT)

    def import_csv(self, target: str, csv_options: Optional[CsvOptions] = None) -> Optional[Table]:
        """Read a CSV file relative to the base path and build a table.

        Returns None, after logging the error, when the file cannot be read.
        """
        path = self.options.resolve_path(target)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to import CSV file {target}: {e}")
            return None
        logger.debug(f"Importing CSV table from {path}")
        return CsvToAdfConverter(csv_options).build_table(content)
