"""Write the generated OpenAPI document and markdown file to disk."""

import json
import logging
from pathlib import Path

import yaml

from .config import AnnotationConfig
from .constants import OPENAPI_JSON_FILENAME, OPENAPI_YAML_FILENAME

logger = logging.getLogger(__name__)


def dump_yaml(doc: dict) -> str:
    return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True, default_flow_style=False)


def write_openapi(doc: dict, out_dir, generate_json: bool = False) -> list[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    yaml_path = out_dir / OPENAPI_YAML_FILENAME
    yaml_path.write_text(dump_yaml(doc), encoding="utf-8")
    written.append(yaml_path)

    if generate_json:
        json_path = out_dir / OPENAPI_JSON_FILENAME
        json_path.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
        written.append(json_path)

    for p in written:
        logger.info("Wrote %s", p)
    return written


def _cell(text: str) -> str:
    return str(text).replace("|", "\\|").replace("\n", "<br>")


def render_markdown(markdown_map: dict, annotation_config: AnnotationConfig) -> str:
    """One section per configured annotation, one table row per target (sorted)."""
    lines = []
    for entry in annotation_config.markdown_generation_annotations:
        heading = entry.markdown_heading or entry.annotation_name
        lines.append(f"# {heading}")
        lines.append("")
        if entry.markdown_description:
            lines.append(entry.markdown_description.strip())
            lines.append("")
        rows = markdown_map.get(entry.annotation_name) or {}
        if not rows:
            lines.append("_No entries._")
            lines.append("")
            continue
        lines.append(f"| Name | {_cell(entry.annotation_name)} |")
        lines.append("| --- | --- |")
        for target in sorted(rows):
            lines.append(f"| {_cell(target)} | {_cell(rows[target])} |")
        lines.append("")
    return "\n".join(lines)


def write_markdown(markdown_map: dict, annotation_config: AnnotationConfig, out_dir) -> Path | None:
    filename = annotation_config.markdown_generation_filename
    if not filename or not annotation_config.markdown_generation_annotations:
        return None
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / (filename if filename.endswith(".md") else filename + ".md")
    path.write_text(render_markdown(markdown_map, annotation_config), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
