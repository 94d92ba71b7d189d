#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
scriptproxy command line entry
Checks the environment and runs the proxy server
"""
import argparse
import logging
import sys

import uvicorn
from dotenv import find_dotenv, load_dotenv

from .config import ConfigError, check_environment, format_missing_keys, get_config

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'info'):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _check(args) -> bool:
    """Load .env and report missing keys; True when complete"""
    load_dotenv(args.env_file or find_dotenv(usecwd=True))

    missing = check_environment(args.env_example)
    if missing:
        print(format_missing_keys(missing))
        logger.error("Some environment variables are missing! Please check the table above.")
        return False
    return True


def cmd_check_env(args):
    """Only run the environment check"""
    return 0 if _check(args) else 1


def cmd_serve(args):
    """Run the proxy server"""
    if not _check(args):
        return 1

    try:
        settings = get_config()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    from .server import create_app

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Serving {settings.repository_url} ({settings.branch}) on {host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=args.log_level)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='scriptproxy - installer script proxy for a GitHub repository',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scriptproxy serve
  scriptproxy serve --env-file .env.production --port 8080
  scriptproxy check-env --env-example .env.example
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='commands')

    def add_env_args(p):
        p.add_argument('--env-file', default=None, help='.env file to load (default: search from cwd)')
        p.add_argument('--env-example', default=None, help='reference keys file (default: ./.env.example)')
        p.add_argument('--log-level', default='info',
                       choices=['critical', 'error', 'warning', 'info', 'debug'],
                       help='logging level')

    serve_parser = subparsers.add_parser('serve', help='run the proxy server')
    add_env_args(serve_parser)
    serve_parser.add_argument('--host', default=None, help='bind address (overrides HOST)')
    serve_parser.add_argument('--port', type=int, default=None, help='bind port (overrides PORT)')
    serve_parser.set_defaults(func=cmd_serve)

    check_parser = subparsers.add_parser('check-env', help='check required environment variables')
    add_env_args(check_parser)
    check_parser.set_defaults(func=cmd_check_env)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(args.log_level)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
