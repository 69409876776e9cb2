"""
POS Admin - Image API Service
=============================
Klient REST dla api/images: upload multipart, CRUD metadanych,
filtr po typie, lista plików na serwerze.
"""

from typing import List, Optional, Union
import logging

from config.settings import ALLOWED_IMAGE_TYPES, ENDPOINTS, MAX_IMAGE_SIZE, MAX_IMAGE_SIZE_MB
from core.api_client import FileSpec, UploadTuple, file_tuple
from core.base_service import BaseApiService, unwrap_list
from core.exceptions import FileTooLargeError, InvalidFileTypeError
from core.validation import ValidationResult, Validator, coerce_enum
from core.wire import PagedResponse
from gallery.models import Image, ImageType

logger = logging.getLogger(__name__)


def validate_image_file(file: FileSpec) -> UploadTuple:
    """
    Sprawdź plik przed uploadem.

    Args:
        file: Ścieżka, bajty, krotka (nazwa, zawartość[, mime]) lub obiekt pliku

    Returns:
        (nazwa, zawartość, mime) gotowe do wysłania

    Raises:
        InvalidFileTypeError: Typ spoza JPEG / PNG / GIF / WebP
        FileTooLargeError: Plik większy niż MAX_IMAGE_SIZE_MB
    """
    name, content, mime = file_tuple(file)

    if mime not in ALLOWED_IMAGE_TYPES:
        raise InvalidFileTypeError(name, sorted(ALLOWED_IMAGE_TYPES))

    if len(content) > MAX_IMAGE_SIZE:
        raise FileTooLargeError(name, len(content) / (1024 * 1024), MAX_IMAGE_SIZE_MB)

    return name, content, mime


class ImageApiService(BaseApiService[Image]):
    """
    Obrazy galerii.

    Usage:
        service = ImageApiService()
        image = service.upload("logo.png", "Logo sklepu", ImageType.LOGO)
        print(image.public_url)
    """

    PATH = ENDPOINTS["IMAGES"]
    MODEL = Image
    ENTITY_NAME = "Image"

    def validate(self, dto: Image) -> ValidationResult:
        return (Validator()
            .max_length("imageTitle", dto.image_title, 150)
            .max_length("description", dto.description, 255)
            .result())

    def upload(
        self,
        file: FileSpec,
        title: str,
        image_type: Union[ImageType, str] = ImageType.ITEM,
        description: str = None,
        tag: str = None,
        device_code: str = None,
    ) -> Optional[Image]:
        """
        Wyślij plik (pole "file") z metadanymi.

        Raises:
            EntityValidationError: Brak tytułu
            InvalidFileTypeError / FileTooLargeError: Plik odrzucony lokalnie
            ApiError: Błąd API
        """
        (Validator()
            .required("imageTitle", title)
            .max_length("imageTitle", title, 150)
            .result()
            .raise_if_invalid(self.ENTITY_NAME))

        upload_file = validate_image_file(file)
        fields = {
            "imageTitle": title,
            "imageType": coerce_enum(ImageType, image_type or ImageType.ITEM, "imageType"),
            "description": description or "",
            "tag": tag or "",
            "deviceCode": device_code,
        }
        created = self.client.upload(self._path("upload"), upload_file, fields)
        logger.info(f"[Image] Uploaded: {upload_file[0]} ({len(upload_file[1])} bytes)")
        return self._to_model(created)

    def by_type(self, image_type: Union[ImageType, str]) -> List[Image]:
        return self._get_list("by-type", coerce_enum(ImageType, image_type, "imageType").value)

    def search_by_type(
        self,
        image_type: Union[ImageType, str],
        term: str = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> PagedResponse[Image]:
        return self.get_paged({
            "imageType": coerce_enum(ImageType, image_type, "imageType"),
            "search": term,
            "pageNumber": page_number,
            "pageSize": page_size,
        })

    def list_files(self) -> List[str]:
        return [str(name) for name in unwrap_list(self.client.get(self._path("files", "list")))]
