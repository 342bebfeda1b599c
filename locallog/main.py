#!/usr/bin/env python3
"""
Command line entry point for locallog.

Usage:
    # Serve static files, announcing on a console log
    python -m locallog.main serve --config conf.yaml --port 8080

    # Most recent 20 entries of a store
    python -m locallog.main query --dir ./logs --limit 20

    # One entry by id
    python -m locallog.main query --dir ./logs --id 5f0c...
"""

import argparse
import functools
import sys
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import List, Optional

from locallog.core.entry import Level, parse_time, utc_now
from locallog.core.store import LocalLogError, LocalStore
from locallog.display.console import format_entry
from locallog.log import new_console_log
from locallog.utils.config import Config
from locallog.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='locallog - embedded local log store'
    )
    
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='YAML configuration file'
    )
    
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    serve = subparsers.add_parser('serve', help='Serve static files over HTTP')
    serve.add_argument(
        '--host',
        type=str,
        default=None,
        help='Host to bind to (default: server.host)'
    )
    serve.add_argument(
        '--port',
        type=int,
        default=None,
        help='Port to listen on (default: server.port)'
    )
    serve.add_argument(
        '--public-dir',
        type=str,
        default=None,
        help='Directory to serve, relative to the working directory (default: server.public_dir)'
    )
    
    query = subparsers.add_parser('query', help='Print entries from a store')
    query.add_argument(
        '--dir',
        type=str,
        default=None,
        help='Store directory (default: store.directory)'
    )
    query.add_argument(
        '--id',
        type=str,
        default=None,
        help='Print the single entry with this id'
    )
    query.add_argument(
        '--before',
        type=parse_time,
        default=None,
        help='Exclusive upper time bound, RFC 3339 (default: now)'
    )
    query.add_argument(
        '--level',
        type=Level.parse,
        default=Level.ANY,
        help='ANY, INFO, WARNING, ERROR or CRITICAL (default: ANY)'
    )
    query.add_argument(
        '--limit',
        type=int,
        default=20,
        help='Maximum entries to print (default: 20)'
    )
    
    return parser.parse_args(argv)


def serve(config: Config, args: argparse.Namespace) -> int:
    """Run a static file server until interrupted."""
    log = new_console_log(line_spacing=int(config.get("display.line_spacing", 0)))
    
    host = args.host or config.get("server.host")
    port = args.port if args.port is not None else int(config.get("server.port"))
    public_dir = (Path.cwd() / (args.public_dir or config.get("server.public_dir"))).resolve()
    
    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(public_dir))
    
    try:
        with ThreadingHTTPServer((host, port), handler) as server:
            log.info("serving static files from: ", str(public_dir))
            log.info("server listening on port ", port)
            server.serve_forever()
    except KeyboardInterrupt:
        log.info("server stopped")
    except OSError as e:
        log.critical("server error: ", str(e))
        return 1
    finally:
        log.close()
    
    return 0


def query(config: Config, args: argparse.Namespace, out=None) -> int:
    """Print entries from a store directory."""
    out = out or sys.stdout
    store_dir = Path(args.dir or config.get("store.directory"))
    
    try:
        with LocalStore(store_dir) as store:
            if args.id:
                entries = [store.get_by_id(args.id)]
            else:
                before = args.before or utc_now()
                entries = store.get(before, args.level, args.limit)
    except LocalLogError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    
    for entry in entries:
        out.write(format_entry(entry) + "\n")
    
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = Config(args.config)
    
    configure_logging(
        log_level=config.get("logging.level", "WARNING"),
        log_format=config.get("logging.format", "console"),
    )
    
    logger.debug("Starting locallog", command=args.command)
    
    if args.command == 'serve':
        return serve(config, args)
    return query(config, args)


if __name__ == '__main__':
    sys.exit(main())
