from pathlib import Path
from typing import Any, Dict, Optional
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def is_inline_source(src: str) -> bool:
    return src.startswith("data:image")


def image_attrs(
    src: str,
    alt: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    lightbox: bool = False,
) -> Dict[str, Any]:
    """Attributes for an <img> tag.

    Inline previews are drawn straight from their bytes. Stored images are
    fetched lazily and carry their dimensions when known so the grid does
    not reflow while they load.
    """
    fit = "object-contain" if lightbox else "object-cover"
    if is_inline_source(src):
        return {"src": src, "alt": alt, "class": f"inline {fit}"}

    attrs: Dict[str, Any] = {
        "src": src,
        "alt": alt,
        "class": f"remote {fit}",
        "loading": "lazy",
        "decoding": "async",
    }
    if width and height:
        attrs["width"] = width
        attrs["height"] = height
    return attrs


jinja_env.globals["image_attrs"] = image_attrs


def render(name: str, **ctx) -> HTMLResponse:
    template = jinja_env.get_template(name)
    return HTMLResponse(template.render(**ctx))
