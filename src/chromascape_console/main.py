#!/usr/bin/env python3
"""
ChromaScape Console - Main Entry Point

Usage:
    chromascape-console --list                       # List available scripts
    chromascape-console --script alpha.script \\
        --duration 10 --window-mode Fixed --start    # Start a run and follow it
    chromascape-console --transport pull             # Poll instead of WebSockets
"""

import argparse
import asyncio
import logging

from .models import WindowMode
from .settings import TRANSPORTS, Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ChromaScape operator console")
    parser.add_argument(
        "--url",
        help="Backend base URL (default from settings)",
    )
    parser.add_argument(
        "--settings",
        help="JSON settings file",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        help="Topic transport: push (WebSocket) or pull (polling)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available scripts and exit",
    )
    parser.add_argument(
        "--script",
        help="Script to select",
    )
    parser.add_argument(
        "--duration",
        default="",
        help="Run duration in minutes",
    )
    parser.add_argument(
        "--window-mode",
        choices=[mode.value for mode in WindowMode],
        help="Client window mode",
    )
    parser.add_argument(
        "--start",
        action="store_true",
        help="Start the selected script",
    )
    parser.add_argument(
        "--stop-on-exit",
        action="store_true",
        help="Stop the script when the console exits",
    )
    parser.add_argument(
        "--preview-dir",
        help="Save colour filter previews to this directory",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def load_settings(args) -> Settings:
    """Settings file first, then command-line overrides."""
    settings = Settings.load(args.settings)
    overrides = {}
    if args.url:
        overrides["backend_url"] = args.url
    if args.transport:
        overrides["transport"] = args.transport
    settings.update(**overrides)
    return settings


async def run_console(args, settings: Settings):
    """Run one console session until interrupted."""
    from .console import Console

    console = Console(
        settings,
        log_sink=lambda line: print(f"| {line}"),
        notice_handler=lambda notice: print(f"[{notice.kind}] {notice.message}"),
    )

    try:
        await console.start()

        if args.list:
            for name in console.catalog.names:
                print(name)
            return

        if args.script:
            try:
                console.select_script(args.script)
            except KeyError:
                logger.error(f"Script {args.script} not found, available: {console.catalog.names}")
                return
            console.set_duration(args.duration)
            console.set_window_mode(args.window_mode)
            if args.start:
                await console.toggle_run()

        logger.info("Press Ctrl+C to stop")
        last_label = None
        last_refresh = 0
        while True:
            if console.progress_view.label != last_label:
                last_label = console.progress_view.label
                print(f"{console.toggle_view.label:>5} {console.progress_view.bar()}")
            if args.preview_dir and console.preview_view.refreshes != last_refresh:
                last_refresh = console.preview_view.refreshes
                console.preview_view.save(args.preview_dir)
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        if args.stop_on_exit and console.reconciler.running:
            await console.reconciler.stop()
        await console.close()


def main():
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    logger.info("ChromaScape console starting...")
    settings = load_settings(args)

    try:
        asyncio.run(run_console(args, settings))
    except KeyboardInterrupt:
        logger.info("Console stopped")


if __name__ == "__main__":
    main()
