import logging

from PIL import Image, ImageDraw, ImageFont

from . import utils
from .errors import InternalError

logger = logging.getLogger(__name__)

TOP_N = 5
FONT_CANDIDATES = ("DejaVuSans.ttf", "arial.ttf")


def _load_font(size):
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


def generate_summary_image(total_countries, top_countries, timestamp, path=None):
    """
    Generate a summary PNG showing total countries, the top GDP countries,
    and last refresh timestamp. Saves image to cache path.
    """
    path = path or utils.get_summary_image_path()

    img = Image.new("RGB", (800, 500), color="white")
    draw = ImageDraw.Draw(img)
    font_title = _load_font(28)
    font_body = _load_font(20)

    # Header
    draw.text((20, 20), "Country Summary Report", fill="black", font=font_title)
    draw.text((20, 70), f"Total Countries: {total_countries}", fill="black", font=font_body)
    draw.text((20, 120), f"Top {TOP_N} Countries by Estimated GDP:", fill="black", font=font_body)

    y = 160
    if not top_countries:
        draw.text((40, y), "No GDP data available.", fill="gray", font=font_body)
    else:
        for c in top_countries:
            draw.text((40, y), f"- {c.name}: {round(c.estimated_gdp, 2):,}", fill="blue", font=font_body)
            y += 30

    draw.text((20, 400), f"Last Refresh: {timestamp}", fill="black", font=font_body)

    img.save(path, "PNG")
    return path


def render_summary(store, now):
    """Redraw the summary from the current store contents."""
    total = store.count()
    top = store.top_by_gdp(TOP_N)
    try:
        path = generate_summary_image(total, top, now.isoformat())
    except (OSError, ValueError) as exc:
        raise InternalError(f"Could not render summary image: {exc}") from exc
    logger.info("Summary image written to %s", path)
    return path
