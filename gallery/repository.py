"""
POS Admin - Image Repository
============================
Bezpieczny dostęp do galerii obrazów.
"""

from typing import List, Optional, Union
import logging

from core.base_repository import BaseRepository
from core.events import EventBus, EventType
from core.wire import PagedResponse
from gallery.models import Image, ImageType
from gallery.service import ImageApiService

logger = logging.getLogger(__name__)


class ImageRepository(BaseRepository):
    """
    Repozytorium obrazów.

    Usage:
        repo = ImageRepository()
        for image in repo.logos():
            print(repo.image_url(image))
    """

    ENTITY_NAME = "Image"

    TYPE_LABELS = {
        ImageType.LOGO: "Logo",
        ImageType.ADVERTISEMENT: "Reklama",
        ImageType.BANNER: "Baner",
        ImageType.ITEM: "Produkt",
    }

    def __init__(self, service: ImageApiService = None, event_bus: EventBus = None):
        super().__init__(service or ImageApiService(), event_bus=event_bus)

    def upload(self, file, title: str, image_type: Union[ImageType, str] = ImageType.ITEM,
               description: str = None, tag: str = None, device_code: str = None) -> Optional[Image]:
        result = self._attempt(
            "upload", self.service.upload, None,
            file, title, image_type, description, tag, device_code,
        )
        if result.ok:
            self._publish(EventType.RECORD_CREATED, record=result.value.to_wire())
        return result.value

    def by_type(self, image_type: Union[ImageType, str]) -> List[Image]:
        return self._attempt(f"by_type({image_type})", self.service.by_type, [], image_type).value

    def logos(self) -> List[Image]:
        return self.by_type(ImageType.LOGO)

    def advertisements(self) -> List[Image]:
        return self.by_type(ImageType.ADVERTISEMENT)

    def product_images(self) -> List[Image]:
        return self.by_type(ImageType.ITEM)

    def search_by_type(self, image_type: Union[ImageType, str], term: str = None,
                       page_number: int = 1, page_size: int = 10) -> Optional[PagedResponse]:
        return self._attempt(
            f"search_by_type({image_type})", self.service.search_by_type, None,
            image_type, term, page_number, page_size,
        ).value

    def list_files(self) -> List[str]:
        return self._attempt("list_files", self.service.list_files, []).value

    def image_url(self, image: Image) -> str:
        """Pełny URL obrazu (ścieżki względne doklejane do bazowego URL API)."""
        public_url = image.public_url or ""
        if public_url.startswith("http"):
            return public_url
        return f"{self.service.client.base_url}{public_url.lstrip('/')}"

    @classmethod
    def type_label(cls, image_type: Optional[ImageType]) -> str:
        return cls.TYPE_LABELS.get(image_type, "") if image_type else ""
