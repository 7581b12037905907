import sys
import json
import logging
import argparse
from dataclasses import asdict

import colorama
from colorama import Fore, Style

from vget.bootstrap import create_container, resolve_extractor
from vget.core.errors import ExtractionError, ConfigError

logger = logging.getLogger("vget")

def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not debug:
        # Keep the driver quiet unless asked.
        logging.getLogger("asyncio").setLevel(logging.ERROR)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vget", description="Resolve a page URL into a downloadable media URL")
    parser.add_argument("url", nargs="?", help="Page or file URL")
    parser.add_argument("-v", "--visible", action="store_true", help="Show the browser window instead of running headless")
    parser.add_argument("--type", dest="media_type", help="Force browser extraction for this media type (e.g. m3u8, mp4)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--list", action="store_true", help="List registered extractors and exit")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser

def main(argv=None) -> int:
    # Init colorama for Windows ANSI support
    colorama.just_fix_windows_console()
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.url and not args.list:
        parser.error("a URL is required")
    setup_logging(args.debug)

    try:
        container = create_container(visible=args.visible)
    except ConfigError as e:
        print(f"{Fore.RED}✗ Configuration error: {e}{Style.RESET_ALL}", file=sys.stderr)
        return 1

    if args.list:
        for extractor in container["registry"].list():
            print(extractor.name)
        return 0

    try:
        extractor = resolve_extractor(container, args.url, visible=args.visible, media_type=args.media_type)
        print(f"{Fore.CYAN}[{extractor.name}]{Style.RESET_ALL} Extracting {args.url}", file=sys.stderr)
        media = extractor.extract(args.url)
    except ExtractionError as e:
        print(f"{Fore.RED}✗ Extraction failed: {e}{Style.RESET_ALL}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(asdict(media), indent=2, ensure_ascii=False))
        return 0

    best = media.best if media.formats else None
    print(f"{Fore.GREEN}✓{Style.RESET_ALL} {media.title}")
    print(f"  ID: {media.id}  |  Formats: {len(media.formats)}")
    if best is not None:
        print(f"  URL: {best.url}")
        for name, value in best.headers.items():
            print(f"  {name}: {value}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
