from decouple import config

from .base import BASE_DIR

MEDIA_URL = config("MEDIA_URL", default="/media/")
MEDIA_ROOT = config("MEDIA_ROOT", default=str(BASE_DIR / "media"))

# Directory under the media storage holding uploaded event images
MEDIA_BUCKET_EVENT_ASSETS = config("MEDIA_BUCKET_EVENT_ASSETS", default="event-assets")

# 5MB uploads plus multipart overhead
DATA_UPLOAD_MAX_MEMORY_SIZE = 6 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 6 * 1024 * 1024

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}
