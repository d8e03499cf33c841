#!/usr/bin/env python3
"""
envcontext command line
=======================

Resolve one or more dotenv-style sources and print the resulting properties.

Usage:
    envcontext .env .env.local
    envcontext --config envcontext.yaml --format json
"""

import json
import sys
from typing import List, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .config.settings import LoaderSettings
from .exceptions import CircularReference, EnvContextLoaderError
from .loader import EnvContextLoader
from .utils.logger import setup_logging


FORMATS = ('env', 'json', 'yaml')


def format_properties(properties: Mapping[str, str], fmt: str = 'env') -> str:
    """Render properties in one of ``FORMATS``."""
    data = dict(sorted(properties.items()))

    if fmt == 'json':
        return json.dumps(data, indent=2)
    elif fmt == 'yaml':
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=True).rstrip('\n')
    elif fmt == 'env':
        return "\n".join(f"{key}={_quote(value)}" for key, value in data.items())
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def _quote(value: str) -> str:
    if any(c in value for c in ' \t#"\'\n'):
        escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
        return f'"{escaped}"'
    return value


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog='envcontext',
        description='Resolve ${NAME} placeholders across dotenv-style files'
    )
    parser.add_argument('sources', nargs='*', help='Source files, in load order (later files override earlier ones)')
    parser.add_argument('--config', help='Settings YAML file (defaults to $ENVCONTEXT_CONFIG)')
    parser.add_argument('--format', choices=FORMATS, default='env', help='Output format')
    parser.add_argument('--no-environment', action='store_true', help='Do not fall back to environment variables')
    parser.add_argument('--no-properties', action='store_true', help='Do not fall back to process properties')
    parser.add_argument('--dotenv', help='Bootstrap .env file loaded into the environment first')
    parser.add_argument('--log-level', help='Logging level (overrides settings)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function for command-line usage."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.dotenv:
        load_dotenv(args.dotenv, override=False)

    try:
        if args.config:
            settings = LoaderSettings.from_file(args.config)
        else:
            settings = LoaderSettings.from_env()
    except EnvContextLoaderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.sources:
        settings.sources = list(args.sources)
    if args.no_environment:
        settings.use_environment = False
    if args.no_properties:
        settings.use_properties = False
    if args.log_level:
        settings.logging['level'] = args.log_level

    setup_logging(settings.as_config(), log_level=settings.logging.get('level', 'WARNING'))

    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 2

    if not settings.sources:
        parser.print_help()
        return 2

    loader = EnvContextLoader(settings=settings)
    try:
        properties = loader.load()
    except CircularReference as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except EnvContextLoaderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_properties(properties, args.format))
    return 0


if __name__ == '__main__':
    sys.exit(main())
