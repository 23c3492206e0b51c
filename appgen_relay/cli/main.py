"""CLI: appgen-relay serve, config validate."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from ..config import load_config, validate_config


class _SuppressCancelled(logging.Filter):
    """Drop CancelledError tracebacks from SSE streams cut off at shutdown."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.exc_info:
            exc_type = record.exc_info[0]
            if exc_type is asyncio.CancelledError:
                return False
        return True


def cmd_serve(args):
    """Start the relay HTTP server."""
    import uvicorn

    from ..relay import create_app

    config = load_config(config_path=args.config)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port

    errors = validate_config(config)
    if errors:
        for err in errors:
            print(f"Config error: {err}", file=sys.stderr)
        sys.exit(1)

    logging.getLogger("uvicorn.error").addFilter(_SuppressCancelled())

    app = create_app(config)
    logging.getLogger(__name__).info(
        "Listening on %s:%d", config.server.host, config.server.port,
    )
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=args.log_level.lower(),
        timeout_graceful_shutdown=2,
    )


def cmd_config_validate(args):
    """Validate a config file."""
    try:
        config = load_config(config_path=args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        print("Config validation failed:")
        for err in errors:
            print(f"  - {err}")
        sys.exit(1)

    print("Config is valid.")
    print(f"  Upstream:   {config.upstream.url} (key from ${config.upstream.api_key_env})")
    print(f"  Listen:     {config.server.host}:{config.server.port}")
    print(f"  Keep-alive: every {config.stream.keep_alive_interval:g}s")


def main(argv: list[str] | None = None):
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="appgen-relay",
        description="SSE relay for streaming HTML app generation",
    )
    parser.add_argument("--config", "-c", help="Path to config file")
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the relay server")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", "-p", type=int, help="Port (default from config or $PORT)")

    # config
    config_parser = subparsers.add_parser("config", help="Config management")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("validate", help="Validate config file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "config":
        if args.config_command == "validate":
            cmd_config_validate(args)
        else:
            print("Usage: appgen-relay config validate")
            sys.exit(1)


if __name__ == "__main__":
    main()
