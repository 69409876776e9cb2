"""
Gallery Models
==============
DTO obrazów galerii.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from core.wire import WireModel


class ImageType(str, Enum):
    """Typ obrazu (wartości jak w API)"""
    LOGO = "Logo"
    ADVERTISEMENT = "Publicidad"
    BANNER = "Banner"
    ITEM = "Item"


class Image(WireModel):
    """Obraz (klucz: imageCode, nadawany przez serwer)"""
    image_code: Optional[str] = None
    image_title: Optional[str] = None
    image_type: Optional[ImageType] = None
    description: Optional[str] = None
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    public_url: Optional[str] = None
    original_file_name: Optional[str] = None
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    is_active: bool = True
    display_order: Optional[int] = None
    alt_text: Optional[str] = None
    tags: Optional[str] = None
    device_code: Optional[str] = None
