"""Command-line front end: webvpn {encode,decode,link,base-url,serve}."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import webbrowser
from pathlib import Path

from webvpn.browser import Converter, StoreBackedBridge
from webvpn.config import load_config
from webvpn.errors import CodecError
from webvpn.prefs import JsonFilePreferenceStore, PreferenceError
from webvpn.schemes import SCHEMES, get_codec

logger = logging.getLogger("webvpn.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webvpn",
        description="Rewrite http(s) URLs into WebVPN gateway addresses.",
    )
    parser.add_argument("--config", type=Path, default=None, help="INI file to load")
    parser.add_argument("--scheme", choices=sorted(SCHEMES), default=None)
    parser.add_argument("--prefs", default=None, help="preference file (JSON)")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encode", help="print the gateway path for URL")
    p.add_argument("url")

    p = sub.add_parser("decode", help="print the URL behind a gateway path")
    p.add_argument("path")

    p = sub.add_parser("link", help="print the full gateway address for URL")
    p.add_argument("url")
    p.add_argument("--base", default=None, help="base URL for this call only")
    p.add_argument("--open", action="store_true", help="open the address in a browser")

    p = sub.add_parser("base-url", help="show, or save, the preferred base URL")
    p.add_argument("value", nargs="?")

    sub.add_parser("serve", help="run the HTTP service")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.scheme:
        config = dataclasses.replace(config, scheme=args.scheme)
    if args.prefs:
        config = dataclasses.replace(config, prefs_path=args.prefs)

    if args.command == "serve":
        import uvicorn

        from webvpn.app import create_app

        uvicorn.run(create_app(config), host=config.host, port=config.port)
        return 0

    codec = get_codec(config.scheme)
    store = JsonFilePreferenceStore(config.prefs_path)

    try:
        if args.command == "encode":
            print(codec.encode(args.url))
        elif args.command == "decode":
            print(codec.decode(args.path))
        elif args.command == "link":
            opener = webbrowser.open if args.open else None
            bridge = StoreBackedBridge(store, tab_url=args.url, opener=opener)
            converter = Converter(bridge, codec, default_base_url=config.base_url)
            if args.open:
                print(converter.redirect(args.base))
            else:
                print(converter.generate(args.base))
        elif args.command == "base-url":
            converter = Converter(StoreBackedBridge(store), codec, default_base_url=config.base_url)
            if args.value is None:
                print(converter.resolve_base_url())
            else:
                print(converter.save_base_url(args.value))
    except (CodecError, PreferenceError) as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0
