"""
Command Line Interface
======================

``template-engine render <sourcePath>`` renders a template source file, or
every ``.json``/``.yaml``/``.yml`` source under a directory, to disk.
"""

import argparse
import asyncio
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from template_engine.config.logging import get_logger, setup_logging
from template_engine.core.errors import TemplateEngineError, TemplateNotFoundError, TemplateSourceError
from template_engine.core.extensions.base import Extension
from template_engine.core.extensions.pipeline import ExtensionPipeline
from template_engine.core.extensions.registry import ExtensionRegistry
from template_engine.core.rendering.renderer import TemplateRenderer
from template_engine.core.template.loader import SOURCE_SUFFIXES, load_template
from template_engine.models.schemas import RenderOptions, StyleOptions

logger = get_logger(__name__)


def split_names(value: str) -> List[str]:
    """Split a comma-separated extension list."""
    return [name.strip() for name in value.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="template-engine", description="Render abstract template trees to markup and components"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render a template source file or directory")
    render.add_argument("source_path", metavar="sourcePath", help="Template file or directory")
    render.add_argument("-o", "--output-dir", help="Output directory")
    render.add_argument("-n", "--name", help="Output base name (single file only)")
    render.add_argument(
        "-e",
        "--extensions",
        action="extend",
        type=split_names,
        default=[],
        help=(
            "Extensions to apply in order, repeatable or comma-separated "
            f"({', '.join(ExtensionRegistry.available())})"
        ),
    )
    render.add_argument("-c", "--component-name", help="Component name for renderer extensions")
    render.add_argument("--file-extension", help="Output file extension (e.g. .html, .tsx)")
    render.add_argument(
        "--style-format", choices=["inline", "css", "scss"], help="Style output format"
    )
    render.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    return parser


def find_sources(source: Path) -> List[Path]:
    """Template sources under a directory, recursively and sorted."""
    return sorted(
        path for path in source.rglob("*") if path.is_file() and path.suffix.lower() in SOURCE_SUFFIXES
    )


def build_options(
    args: argparse.Namespace, extensions: List[Extension], name: str
) -> Dict[str, Any]:
    """Explicit render option values for one source."""
    values: Dict[str, Any] = {
        "name": name,
        "filename": name,
        "extensions": extensions,
        "write_output_file": True,
        "verbose": args.verbose,
    }
    if args.component_name:
        values["component_name"] = args.component_name
    if args.file_extension:
        extension = args.file_extension
        values["file_extension"] = extension if extension.startswith(".") else f".{extension}"
    if args.style_format:
        values["styles"] = StyleOptions(output_format=args.style_format)
    return values


async def render_source(
    renderer: TemplateRenderer, path: Path, output_dir: Optional[Path], option_values: Dict[str, Any]
) -> List[Path]:
    """
    Load, render and write one source file.

    Raises:
        TemplateSourceError: If the source cannot be parsed
    """
    result = await load_template(path)
    for warning in result.warnings:
        logger.warning("Template warning", source=str(path), warning=warning)

    if not result.success or result.template is None:
        raise TemplateSourceError(
            f"Failed to parse {path}: {'; '.join(result.errors)}", {"errors": result.errors}
        )

    values = dict(option_values, component=result.template.component)
    if output_dir is not None:
        values["output_dir"] = output_dir

    artifacts = await renderer.render_artifacts(result.template.template, RenderOptions(**values))
    return artifacts.written_files


async def run_render(args: argparse.Namespace) -> int:
    """Render the source path described by parsed arguments."""
    extensions = ExtensionRegistry.create_extensions(args.extensions, verbose=args.verbose)

    source = Path(args.source_path)
    if not source.exists():
        raise TemplateNotFoundError(f"Template source not found: {source}", {"path": str(source)})

    renderer = TemplateRenderer()
    output_dir = Path(args.output_dir) if args.output_dir else None

    if source.is_file():
        option_values = build_options(args, extensions, args.name or source.stem)
        written = await render_source(renderer, source, output_dir, option_values)
    else:
        if args.name:
            logger.warning("Ignoring --name for directory sources")

        # Mirror subdirectories under the resolved output root
        base_dir = output_dir
        if base_dir is None:
            probe = RenderOptions(**build_options(args, extensions, source.name))
            base_dir = ExtensionPipeline(extensions).resolve_options(probe).output_dir

        written = []
        sources = find_sources(source)
        if not sources:
            logger.warning("No template sources found", path=str(source))
        for path in sources:
            option_values = build_options(args, extensions, path.stem)
            target_dir = base_dir / path.parent.relative_to(source)
            written.extend(await render_source(renderer, path, target_dir, option_values))

    for path in written:
        print(f"Wrote {path}")

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the template engine CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG")

    try:
        return asyncio.run(run_render(args))
    except TemplateEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        return 1
    except Exception as e:
        logger.error("Render failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
