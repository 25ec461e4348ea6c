#!/usr/bin/env python3
"""
Generate an OpenAPI description (and optional markdown notes) from OWL ontologies.

Usage:
  ontoapi -c config.yaml
  ontoapi -c config.yaml -o build/ --workers 4 -v

Outputs go to <output_dir>/<name>/ unless -o is given.
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import YamlConfig
from .exceptions import OntoApiError
from .mapper import Mapper
from .openapi import build_document
from .serializer import write_markdown, write_openapi

logger = logging.getLogger(__name__)


def run(config: YamlConfig, out_dir: Path | None = None, workers: int = 1) -> Path:
    """Compile every configured ontology and write the outputs; returns the output directory."""
    out_dir = Path(out_dir) if out_dir else config.output_path
    result = Mapper(config, workers=workers).run()
    doc = build_document(config, result)
    write_openapi(doc, out_dir, generate_json=config.flags.generate_json_file)
    write_markdown(result.markdown, config.annotation_config, out_dir)
    return out_dir


# --------------------
# Main
# --------------------
def main_cli(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate an OpenAPI description from OWL ontologies."
    )
    parser.add_argument("-c", "--config", required=True, help="Path to the YAML configuration file")
    parser.add_argument(
        "-o", "--output",
        help="Output directory. Defaults to <output_dir>/<name> from the configuration"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of classes compiled in parallel. Default: 1"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = YamlConfig.from_yaml(config_path)
        out_dir = run(config, args.output, workers=args.workers)
    except OntoApiError as e:
        logger.error("%s", e)
        sys.exit(1)

    print(f"Wrote: {out_dir}")


if __name__ == "__main__":
    main_cli()
