"""Image uploads for event pages.

Uploads are checked by content rather than by extension or declared content type,
re-encoded as WebP and written to Django's default storage under the event's folder.
"""

import io
import uuid
import warnings
from dataclasses import dataclass
from urllib.parse import urljoin

import structlog
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from PIL import Image, ImageOps, UnidentifiedImageError

from accounts.models import User
from common.exceptions import NotFoundError, ValidationError
from events.models import Event, MediaAsset

logger = structlog.get_logger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_ASSETS_PER_EVENT = 20
MIN_DIMENSIONS = (400, 300)
MAX_DIMENSIONS = (4000, 4000)
WEBP_QUALITY = 85

# Pillow format name -> MIME type
ALLOWED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    format: str
    mime_type: str


@dataclass(frozen=True)
class OptimizedImage:
    content: bytes
    width: int
    height: int


def validate_uploaded_image(content: bytes) -> ImageMetadata:
    """Check size, real file type and dimensions of an uploaded image.

    Raises:
        ValidationError: with a message suitable for the uploader.
    """
    if len(content) > MAX_FILE_SIZE:
        raise ValidationError(f"File size exceeds {MAX_FILE_SIZE // 1024 // 1024}MB limit")

    max_width, max_height = MAX_DIMENSIONS
    try:
        # Pillow refuses or warns about pixel counts far past MAX_DIMENSIONS before decoding.
        with warnings.catch_warnings():
            warnings.simplefilter("error", Image.DecompressionBombWarning)
            with Image.open(io.BytesIO(content)) as image:
                image_format = image.format or ""
                width, height = image.size
                image.verify()
    except (Image.DecompressionBombError, Image.DecompressionBombWarning) as e:
        logger.info("media_upload_decompression_bomb", error=str(e))
        raise ValidationError(f"Image dimensions exceed maximum {max_width}x{max_height}px") from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.info("media_upload_unreadable", error=str(e))
        raise ValidationError("Invalid file type. Only JPEG, PNG, and WebP are allowed") from e

    if image_format not in ALLOWED_FORMATS:
        raise ValidationError("Invalid file type. Only JPEG, PNG, and WebP are allowed")

    if width > max_width or height > max_height:
        raise ValidationError(f"Image dimensions exceed maximum {max_width}x{max_height}px")
    min_width, min_height = MIN_DIMENSIONS
    if width < min_width or height < min_height:
        raise ValidationError(f"Image dimensions below minimum {min_width}x{min_height}px")

    return ImageMetadata(width=width, height=height, format=image_format, mime_type=ALLOWED_FORMATS[image_format])


def optimize_image(content: bytes, max_size: tuple[int, int] = MAX_DIMENSIONS, quality: int = WEBP_QUALITY) -> OptimizedImage:
    """Re-encode as WebP within ``max_size``, applying the EXIF orientation and dropping the metadata."""
    with Image.open(io.BytesIO(content)) as image:
        image = ImageOps.exif_transpose(image)
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
        image.thumbnail(max_size)
        buffer = io.BytesIO()
        image.save(buffer, format="WEBP", quality=quality)
        return OptimizedImage(content=buffer.getvalue(), width=image.width, height=image.height)


def public_url(stored_name: str) -> str:
    """Absolute URL of a stored file. Local storage returns site-relative URLs."""
    return urljoin(settings.BASE_URL, default_storage.url(stored_name))


def asset_path(event: Event, kind: str, filename: str) -> str:
    return f"{event.id}/{kind.lower()}/{filename}"


def upload_media(event: Event, owner: User, content: bytes, kind: str, alt: str = "") -> MediaAsset:
    """Validate, optimize and store an image, and record it as an asset of the event.

    Raises:
        ValidationError: too many assets, unknown kind or an unacceptable image.
    """
    if MediaAsset.objects.filter(event=event).count() >= MAX_ASSETS_PER_EVENT:
        raise ValidationError(f"Maximum {MAX_ASSETS_PER_EVENT} assets allowed per event")
    if kind not in MediaAsset.Kind.values:
        raise ValidationError("Invalid asset kind. Must be HERO or GALLERY")

    validate_uploaded_image(content)
    optimized = optimize_image(content)

    bucket = settings.MEDIA_BUCKET_EVENT_ASSETS
    path = asset_path(event, kind, f"{uuid.uuid4()}.webp")
    stored_name = default_storage.save(f"{bucket}/{path}", ContentFile(optimized.content))
    try:
        asset = MediaAsset.objects.create(
            event=event,
            owner=owner,
            kind=kind,
            bucket=bucket,
            path=stored_name.removeprefix(f"{bucket}/"),
            public_url=public_url(stored_name),
            mime_type="image/webp",
            size_bytes=len(optimized.content),
            width=optimized.width,
            height=optimized.height,
            alt=alt,
        )
    except Exception:
        default_storage.delete(stored_name)
        raise
    logger.info("media_uploaded", event_id=str(event.id), asset_id=str(asset.id), kind=kind)
    return asset


def delete_media(event: Event, asset_id: uuid.UUID) -> None:
    """Remove an asset and its stored file. A file already missing from storage is not an error."""
    asset = MediaAsset.objects.filter(pk=asset_id, event=event).first()
    if asset is None:
        raise NotFoundError("Asset not found")
    try:
        default_storage.delete(f"{asset.bucket}/{asset.path}")
    except OSError as e:
        logger.warning("media_storage_delete_failed", asset_id=str(asset.id), error=str(e))
    asset.delete()
    logger.info("media_deleted", event_id=str(event.id), asset_id=str(asset_id))
