"""
POS Admin - Gallery Module
==========================
Obrazy: logo, reklamy, banery, zdjęcia produktów.
"""

from gallery.models import Image, ImageType
from gallery.repository import ImageRepository
from gallery.service import ImageApiService, validate_image_file

__all__ = [
    'Image',
    'ImageType',
    'ImageApiService',
    'ImageRepository',
    'validate_image_file',
]
