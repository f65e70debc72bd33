"""Command line entry point for the campus navigation guide."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import AppConfig, load_config, load_default_catalog
from .navigation import Mode, NavigationState, Navigator
from .renderer import RouteRenderer
from .scheduler import ManualTickSource
from .slug import to_slug


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show campus directions for an address fragment.")
    parser.add_argument(
        "address",
        nargs="?",
        default="",
        help="Address fragment of the destination, e.g. 'admin' or '#ccict'. Empty shows the home view.",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Path to a JSON or YAML destination catalog. Defaults to the bundled campus catalog.",
    )
    parser.add_argument("--list", action="store_true", help="List destinations and their addresses.")
    parser.add_argument("--render", type=Path, metavar="OUTPUT", help="Render the marker animation to a video or GIF.")
    parser.add_argument("--duration-ms", type=float, help="Override the animation duration in milliseconds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    args.parser = parser
    return args


def _load(args: argparse.Namespace) -> AppConfig:
    try:
        config = load_config(args.catalog) if args.catalog else load_default_catalog()
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        args.parser.error(f"could not load catalog: {exc}")
    if args.duration_ms is not None:
        if args.duration_ms <= 0:
            args.parser.error("--duration-ms must be positive")
        config.duration_ms = args.duration_ms
    return config


def _print_state(config: AppConfig, state: NavigationState) -> None:
    if state.message:
        print(state.message)
    if state.mode is Mode.HOME or state.destination is None:
        print(config.title or "Campus Navigation")
        for destination in config.destinations:
            print(f"  {destination.name}")
        return

    print(f"Directions to {state.destination.name}")
    for index, step in enumerate(state.steps, start=1):
        print(f"  {index}. {step}")
    if state.destination.map_media_url:
        print(f"Map: {state.destination.map_media_url}")
    if state.destination.photo_url:
        print(f"Photo: {state.destination.photo_url}")


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = _load(args)

    if args.list:
        for destination in config.destinations:
            print(f"#{to_slug(destination.name):<16} {destination.name}")
        return

    navigator = Navigator(config, ManualTickSource())
    navigator.location.assign(args.address)
    state = navigator.start()
    _print_state(config, state)

    if args.render:
        if state.destination is None:
            args.parser.error("--render needs the address of a destination")
        try:
            output_path = RouteRenderer(config, state.destination).render(args.render)
        except (ValueError, ImportError) as exc:
            args.parser.error(str(exc))
        print(f"Saved animation to {output_path}")
    navigator.stop()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
