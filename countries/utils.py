import os
import random
from datetime import datetime, timezone

from django.conf import settings

SUMMARY_IMAGE_NAME = "summary.png"

MULTIPLIER_MIN = 1000
MULTIPLIER_MAX = 2000


def get_now():
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)


def make_multiplier():
    """GDP noise factor drawn uniformly from [1000, 2000)."""
    return MULTIPLIER_MIN + random.random() * (MULTIPLIER_MAX - MULTIPLIER_MIN)


def get_cache_dir():
    """Return the absolute, existing cache directory."""
    path = os.path.abspath(settings.COUNTRIES_CACHE_DIR)
    os.makedirs(path, exist_ok=True)
    return path


def get_summary_image_path():
    """Return full path to the summary image in the writable cache."""
    return os.path.join(get_cache_dir(), SUMMARY_IMAGE_NAME)
