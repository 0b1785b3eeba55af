import io
import logging
import os
import re
import time
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from app.core.config import get_settings
from app.core.exceptions import (
    ImageEncodingException,
    ImageTooLargeException,
    InvalidImageTypeException,
    StorageDeleteException,
    StorageWriteException,
    TooManyImagesException,
)

logger = logging.getLogger(__name__)

settings = get_settings()

UPLOAD_DIR = Path(settings.UPLOAD_DIR)

# --- Image config ---

ALLOWED_IMAGE_CONTENT_TYPES = {"image/png", "image/jpeg", "image/jpg"}

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image
MAX_IMAGE_WIDTH = 800
MAX_IMAGE_PIXELS = 40_000_000  # checked before decoding
MAX_NAME_ATTEMPTS = 10
MAX_GALLERY_IMAGES = 5

OUTPUT_EXT = "webp"


def validate_image(content_type: str | None, file_bytes: bytes) -> None:
    """
    Reject anything outside the raster allow-list or above the size cap.

    Raises:
        InvalidImageTypeException, ImageTooLargeException
    """
    if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
        raise InvalidImageTypeException(content_type)

    if len(file_bytes) > MAX_IMAGE_BYTES:
        raise ImageTooLargeException(len(file_bytes), MAX_IMAGE_BYTES)


def validate_gallery_count(count: int) -> None:
    if count > MAX_GALLERY_IMAGES:
        raise TooManyImagesException(count, MAX_GALLERY_IMAGES)


def transcode_to_webp(file_bytes: bytes) -> bytes:
    """
    Decode an uploaded blob, bound its width and re-encode it as lossless WebP.

    Images wider than MAX_IMAGE_WIDTH are scaled down keeping the aspect
    ratio; narrower ones keep their size. The pixel count is checked from
    the header, before any pixel data is decoded.

    Raises:
        ImageEncodingException: if Pillow cannot decode or encode the data,
            or the image has more than MAX_IMAGE_PIXELS pixels.
    """
    try:
        with Image.open(io.BytesIO(file_bytes)) as im:
            if im.width * im.height > MAX_IMAGE_PIXELS:
                raise ImageEncodingException(
                    f"{im.width}x{im.height} exceeds {MAX_IMAGE_PIXELS} pixels"
                )

            im.load()
            if im.mode not in ("RGB", "RGBA"):
                # palette images keep a transparency key outside their bands
                has_alpha = "A" in im.getbands() or "transparency" in im.info
                im = im.convert("RGBA" if has_alpha else "RGB")

            if im.width > MAX_IMAGE_WIDTH:
                height = max(1, round(im.height * MAX_IMAGE_WIDTH / im.width))
                im = im.resize((MAX_IMAGE_WIDTH, height), Image.Resampling.LANCZOS)

            out = io.BytesIO()
            im.save(out, format="WEBP", lossless=True)
            return out.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageEncodingException(str(e)) from e


def _sanitize_stem(original_name: str | None) -> str:
    """
    "summer shoe.final.jpg" -> "summer-shoe"
    "my#shoe?.png"          -> "my-shoe"

    Only ASCII letters, digits, "_" and "-" survive, so the stored name is
    usable as-is in a URL path.
    """
    name = Path(original_name or "").name
    stem = name.split(".")[0]
    stem = re.sub(r"[^A-Za-z0-9_-]+", "-", stem).strip("-")
    return stem or "image"


def generate_filename(original_name: str | None, upload_dir: Path = UPLOAD_DIR) -> str:
    """
    Build "<stem>-<epoch millis>.webp", bumping the millis while the name is taken.
    """
    stem = _sanitize_stem(original_name)
    millis = time.time_ns() // 1_000_000
    filename = f"{stem}-{millis}.{OUTPUT_EXT}"
    while (upload_dir / filename).exists():
        millis += 1
        filename = f"{stem}-{millis}.{OUTPUT_EXT}"
    return filename


def save_image(
    original_name: str | None,
    content_type: str | None,
    file_bytes: bytes,
    upload_dir: Path = UPLOAD_DIR,
) -> str:
    """
    Validate, transcode and write one upload.

    Returns:
        The generated file name (relative to upload_dir).

    Raises:
        InvalidImageTypeException, ImageTooLargeException,
        ImageEncodingException, StorageWriteException
    """
    validate_image(content_type, file_bytes)
    encoded = transcode_to_webp(file_bytes)

    upload_dir.mkdir(parents=True, exist_ok=True)
    for _ in range(MAX_NAME_ATTEMPTS):
        filename = generate_filename(original_name, upload_dir)
        try:
            # "xb" never overwrites a file another request just created
            with open(upload_dir / filename, "xb") as fh:
                fh.write(encoded)
        except FileExistsError:
            logger.info("Image name %s taken concurrently, retrying", filename)
            continue
        except OSError as e:
            logger.error("Failed to write image %s: %s", filename, e)
            raise StorageWriteException(filename, str(e)) from e
        return filename

    logger.error("No free image name after %d attempts", MAX_NAME_ATTEMPTS)
    raise StorageWriteException(filename, "no free file name")


def delete_image(filename: str, upload_dir: Path = UPLOAD_DIR) -> None:
    """
    Remove a stored file.

    Raises:
        StorageDeleteException: if the file is missing or cannot be removed.
    """
    # Only plain names inside upload_dir are ever deleted
    if not filename or Path(filename).name != filename:
        raise StorageDeleteException(filename, "not a plain file name")
    try:
        os.remove(upload_dir / filename)
    except OSError as e:
        raise StorageDeleteException(filename, str(e)) from e


def discard_image(filename: str | None, upload_dir: Path = UPLOAD_DIR) -> bool:
    """
    Best-effort delete of a superseded file.

    Failures are logged, never raised, so the primary write path is not
    blocked. Returns True when the file was removed.
    """
    if not filename:
        return False
    try:
        delete_image(filename, upload_dir)
    except StorageDeleteException as e:
        logger.warning(e.message)
        return False
    return True


def build_public_url(base_url: str, filename: str) -> str:
    """
    base_url is "<scheme>://<host>" taken from the incoming request.

    Example:
        ("http://localhost:8000", "shoe-1718000000000.webp")
        -> "http://localhost:8000/public/uploads/shoe-1718000000000.webp"
    """
    path = settings.UPLOAD_URL_PATH.strip("/")
    return f"{base_url.rstrip('/')}/{path}/{filename}"


def extract_filename_from_url(url: str | None) -> str | None:
    """
    Given a public URL, return the stored file name.

    Example:
        http://host/public/uploads/shoe-1718000000000.webp
        -> 'shoe-1718000000000.webp'

    Returns None if the URL does not point into the uploads path.
    """
    if not url:
        return None
    marker = "/" + settings.UPLOAD_URL_PATH.strip("/") + "/"
    idx = url.find(marker)
    if idx == -1:
        return None
    return url[idx + len(marker) :] or None
