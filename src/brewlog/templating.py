"""Jinja2 rendering for full pages and list fragments."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from brewlog.exceptions import UnexpectedError
from brewlog.logging import get_logger

TEMPLATE_DIR = Path(__file__).parent / "templates"

logger = get_logger(__name__)

environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **context: Any) -> str:
    """Render ``template_name`` with ``context``.

    Any Jinja failure (missing template, undefined variable, syntax error) is
    logged and re-raised as ``UnexpectedError``, which the app turns into a
    generic 500.
    """
    try:
        return environment.get_template(template_name).render(**context)
    except TemplateError as exc:
        logger.error("template_render_failed", template=template_name, error=str(exc))
        raise UnexpectedError(f"failed to render {template_name}: {exc}") from exc
