"""Entry point: python -m netmap [serve|show|path] [--map PATH]

- No args / "serve": MCP server on stdio (for agent clients)
- "show":            Print the network map as Markdown
- "path":            Print the resolved network map location
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from netmap.config import NetmapConfig, load_config


def _setup_logging(level: str) -> None:
    # stdout is reserved for protocol frames
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_service(config: NetmapConfig):
    from netmap.service import NetworkMapService
    from netmap.storage import NetworkMapStorage

    return NetworkMapService(NetworkMapStorage(config.map_path))


def _run_serve(config: NetmapConfig) -> None:
    from netmap.server import serve

    try:
        asyncio.run(serve(_build_service(config)))
    except KeyboardInterrupt:
        pass


def _run_show(config: NetmapConfig) -> None:
    from netmap.commands import ListAll
    from netmap.formatting import format_result

    print(format_result(_build_service(config).execute(ListAll())))


def _parse_args(argv: list[str]) -> tuple[str, Path | None]:
    cmd = "serve"
    map_path: Path | None = None
    args = iter(argv)
    for arg in args:
        if arg == "--map":
            value = next(args, None)
            if value is None:
                _usage()
            map_path = Path(value)
        elif arg.startswith("--map="):
            map_path = Path(arg.split("=", 1)[1])
        else:
            cmd = arg
    return cmd, map_path


def _usage() -> None:
    print("Usage: python -m netmap [serve|show|path] [--map PATH]")
    print("  serve  MCP server on stdio (default)")
    print("  show   Print the network map")
    print("  path   Print the network map location")
    sys.exit(1)


def main() -> None:
    cmd, map_path = _parse_args(sys.argv[1:])
    config = load_config(map_path=map_path)
    _setup_logging(config.log_level)

    if cmd == "serve":
        _run_serve(config)
    elif cmd == "show":
        _run_show(config)
    elif cmd == "path":
        print(config.map_path)
    else:
        _usage()


if __name__ == "__main__":
    main()
