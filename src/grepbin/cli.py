from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from rich.console import Console
from rich.style import Style
from rich.text import Text

from grepbin.core.config import OUTPUT_FORMATS, THEMES, SearchConfig, load_config
from grepbin.core.errors import ConfigError, InvalidSearchTerm
from grepbin.core.files import collect_files, filter_filetypes
from grepbin.core.search import search_files
from grepbin.core.term import MODES, resolve_pattern
from grepbin.logging_config import configure_logging
from grepbin.ui.hexdump import get_renderer, render_file_header
from grepbin.ui.palette import get_palette

EXIT_MATCH = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


def _byte_count(value: str) -> int:
    try:
        n = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value!r}")
    return n


def _version() -> str:
    try:
        return version("grepbin")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grepbin",
        description="Search binary files for a byte sequence and show hex dump context.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument(
        "-f", "--filepath", nargs="+", required=True, metavar="PATH", help="Files or directories to search"
    )
    parser.add_argument(
        "-s",
        "--search",
        required=True,
        metavar="TERM",
        help="Hex bytes (f9b4ca, F9B4CA and f9B4Ca are all valid) or an ASCII string",
    )
    parser.add_argument("-t", "--filetype", nargs="+", metavar="EXT", help="Only search files with these extensions")
    parser.add_argument("-c", "--context-bytes", type=_byte_count, metavar="BYTES", help="Context block size (default 16)")
    parser.add_argument("-k", "--skip-bytes", type=_byte_count, metavar="BYTES", help="Skip this many bytes of each file")
    parser.add_argument("--mode", choices=MODES, help="How to read the search term (default auto)")
    parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, help="Output format")
    parser.add_argument("--color", choices=("auto", "always", "never"), default="auto")
    parser.add_argument("--theme", choices=THEMES)
    parser.add_argument("--chunk-size", type=_byte_count, metavar="BYTES", help="Read size per scan step")
    parser.add_argument("--config", metavar="FILE", help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return parser


def _consoles(color: str) -> tuple[Console, Console]:
    if color == "always":
        opts = {"force_terminal": True}
    elif color == "never":
        opts = {"no_color": True}
    else:
        opts = {}
    return Console(highlight=False, **opts), Console(stderr=True, highlight=False, **opts)


def _load(args: argparse.Namespace) -> SearchConfig:
    return load_config(args.config).merged(
        block_size=args.context_bytes,
        skip=args.skip_bytes,
        chunk_size=args.chunk_size,
        filetypes=args.filetype,
        mode=args.mode,
        output_format=args.output_format,
        theme=args.theme,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    out, err = _consoles(args.color)

    try:
        config = _load(args)
        pattern = resolve_pattern(args.search, config.mode)
    except (ConfigError, InvalidSearchTerm) as exc:
        err.print(f"grepbin: {exc}", markup=False, soft_wrap=True)
        return EXIT_ERROR

    palette = get_palette(config.theme)
    renderer = get_renderer(config.output_format, palette)
    files = filter_filetypes(collect_files(args.filepath), config.filetypes)

    matched = failed = False
    for result in search_files(
        files,
        pattern,
        block_size=config.block_size,
        skip=config.skip,
        chunk_size=config.chunk_size,
        use_mmap=config.use_mmap,
    ):
        if not result.ok:
            failed = True
            err.print(Text(f"grepbin: {result.error}", style=Style(color=palette.error_fg)), soft_wrap=True)
            continue
        if not result.matched:
            continue
        matched = True
        out.print(render_file_header(result.path, palette), soft_wrap=True)
        for line in renderer.render(result.match_set):
            out.print(line, soft_wrap=True)
        out.print()

    if failed:
        return EXIT_ERROR
    return EXIT_MATCH if matched else EXIT_NO_MATCH


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
