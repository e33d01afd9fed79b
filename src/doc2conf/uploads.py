#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/uploads.py
"""Asset-upload contract consumed by image handling.

The converter never talks to Confluence itself. When image upload is
requested, it hands each local image to an object implementing
:class:`AssetUploader` and references whatever identifier comes back.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class UploadResult:
    """Reference to a stored asset.

    Parameters
    ----------
    id : str
        Identifier of the stored asset
    file_name : str or None
        Name the asset was stored under, when the store reports it

    """

    id: str
    file_name: Optional[str] = None


@runtime_checkable
class AssetUploader(Protocol):
    """Stores a local file and returns a reference to it.

    Implementations should raise :class:`doc2conf.exceptions.UploadError`
    on failure. Any exception is caught by the converter, which then falls
    back to referencing the image by its original path.
    """

    def upload(self, space_key: Optional[str], file_path: Union[str, Path]) -> UploadResult:
        ...
