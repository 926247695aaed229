# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
nano-asgi CLI entry point.

Usage:
    nano-asgi serve myapp.main:server               # Run a NanoServer
    nano-asgi serve myapp.main:server --port 9000   # Override port
    python -m nano_asgi --version

The target is ``module:attribute``. For a ``NanoServer`` attribute:

- with ``--config``, the file (plus environment and CLI overrides) replaces
  the server's configuration and its configured middleware are rebuilt
  from it, see ``NanoServer.configure``;
- without it, only host, port and reload are overridden.

Any other ASGI callable is served as is.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Any

from .config import ServerConfig
from .exceptions import ConfigError


def build_parser() -> argparse.ArgumentParser:
    from . import __version__

    parser = argparse.ArgumentParser(prog="nano-asgi", description="Minimal ASGI toolkit")
    parser.add_argument("--version", "-v", action="version", version=f"nano-asgi {__version__}")
    subcommands = parser.add_subparsers(dest="command")

    serve = subcommands.add_parser("serve", help="Run an application with uvicorn")
    serve.add_argument("app", help="Application import string, module:attribute")
    serve.add_argument("--host", default=None, help="Server host (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=None, help="Server port (default: 3000)")
    serve.add_argument("--reload", action="store_true", default=None, help="Enable auto-reload")
    serve.add_argument("--config", default=None, help="TOML configuration file")
    return parser


def import_app(target: str) -> Any:
    """Resolve ``module:attribute`` to an object."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"Application must be given as module:attribute, got '{target}'")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigError(f"Module '{module_name}' has no attribute '{attr}'") from e


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the ASGI server."""
    import uvicorn

    from .server import NanoServer

    config = ServerConfig.load(args.config, host=args.host, port=args.port, reload=args.reload)
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if sys.path[0] != "":
        sys.path.insert(0, "")
    app = import_app(args.app)

    print(f"nano-asgi serving {args.app} on http://{config.host}:{config.port}", flush=True)
    if config.reload:
        print("Mode: development (auto-reload enabled)", flush=True)

    try:
        if isinstance(app, NanoServer):
            if args.config is not None:
                app.configure(config)
            else:
                app.config.host = config.host
                app.config.port = config.port
                app.config.reload = config.reload
            app.run(args.app)
        else:
            uvicorn.run(
                args.app if config.reload else app,
                host=config.host,
                port=config.port,
                reload=config.reload,
            )
    except KeyboardInterrupt:
        print("\nShutdown.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "serve":
        parser.print_help()
        return 0 if args.command is None else 1

    try:
        return cmd_serve(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
