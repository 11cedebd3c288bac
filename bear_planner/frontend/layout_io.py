"""Save and load planner layouts as .btpl, JSON, or PNG (with embedded JSON).

Three formats, all carrying the same JSON array of object records:

  * ``.btpl``: the planner's own file type, the JSON text UTF-8 encoded
    then base64 encoded. Layouts saved by the web planner load unchanged.
  * ``.json``: the plain JSON array.
  * ``.png``: a rendered picture of the layout with the JSON embedded in a
    PNG tEXt chunk (key: ``bear_planner_layout``), so a saved file is both
    a shareable image and a complete, loadable layout.

Loaders return the raw record list; ``Planner.load_records`` does the shape
check and the swap. Used by the CLI.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from ..engine.errors import LayoutFormatError
from ..engine.planner import Planner
from .render import LayoutRenderer

logger = logging.getLogger(__name__)

METADATA_KEY = "bear_planner_layout"
BTPL_EXTENSION = ".btpl"


def default_layout_filename(when: datetime | None = None) -> str:
    """``bear-trap-layout_YYYY-MM-DD_HH-MM-SS.btpl`` for the given time."""
    when = when or datetime.now()
    return f"bear-trap-layout_{when.strftime('%Y-%m-%d_%H-%M-%S')}{BTPL_EXTENSION}"


def _parse_json(text: str, source: str) -> list:
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise LayoutFormatError(f"{source}: invalid layout JSON ({e})") from e
    if not isinstance(records, list):
        raise LayoutFormatError(f"{source}: layout must be a JSON array")
    return records


def encode_btpl(records: list[dict]) -> str:
    data = json.dumps(records).encode("utf-8")
    return base64.b64encode(data).decode("ascii")


def decode_btpl(text: str) -> list:
    try:
        data = base64.b64decode(text.strip(), validate=True)
        json_text = data.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise LayoutFormatError(f"Corrupted .btpl data ({e})") from e
    return _parse_json(json_text, "btpl")


def save_layout_btpl(records: list[dict], path: str) -> None:
    with open(path, "w", encoding="ascii") as f:
        f.write(encode_btpl(records))


def load_layout_btpl(path: str) -> list:
    with open(path, encoding="ascii", errors="replace") as f:
        return decode_btpl(f.read())


def save_layout_json(records: list[dict], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)
        f.write("\n")


def load_layout_json(path: str) -> list:
    """Load a layout record list from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return _parse_json(f.read(), path)


def save_layout_png(img: Image.Image, records: list[dict], path: str) -> None:
    """Save a rendered layout image with the records embedded as a PNG tEXt chunk."""
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(records))
    img.save(path, pnginfo=info)


def load_layout_png(path: str) -> list:
    """Load a layout record list from a PNG file's tEXt metadata.

    Raises ValueError if the PNG does not contain layout metadata.
    """
    with Image.open(path) as img:
        text_data = getattr(img, "text", None)
        if not text_data or METADATA_KEY not in text_data:
            raise ValueError(
                f"PNG file does not contain layout metadata (missing '{METADATA_KEY}' chunk)"
            )
        return _parse_json(text_data[METADATA_KEY], path)


def load_layout(path: str) -> list:
    """Load a layout from a file, dispatching by extension.

    Supports .btpl, .json and .png. Raises ValueError for anything else.
    """
    lower = path.lower()
    if lower.endswith(BTPL_EXTENSION):
        records = load_layout_btpl(path)
    elif lower.endswith(".json"):
        records = load_layout_json(path)
    elif lower.endswith(".png"):
        records = load_layout_png(path)
    else:
        raise ValueError(f"Unsupported file extension: {path}")
    logger.info("Read %s (%d records)", path, len(records))
    return records


def save_layout(
    planner: Planner,
    path: str,
    renderer: LayoutRenderer | None = None,
) -> None:
    """Write the planner's current layout, picking the format by extension."""
    records = planner.to_records()
    lower = path.lower()
    if lower.endswith(BTPL_EXTENSION):
        save_layout_btpl(records, path)
    elif lower.endswith(".json"):
        save_layout_json(records, path)
    elif lower.endswith(".png"):
        img = (renderer or LayoutRenderer()).render(planner)
        save_layout_png(img, records, path)
    else:
        raise ValueError(f"Unsupported file extension: {path}")
    logger.info("Saved %s (%d records)", path, len(records))


def load_into(planner: Planner, path: str) -> int:
    """Load a layout file straight into a planner, replacing its contents."""
    return planner.load_records(load_layout(path))
