#!/usr/bin/env python3
"""hashvault CLI - run the content and reference services."""
import argparse
import logging


def setup_logging(log_level: str):
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _run(args, components, label):
    from hashvault.app import create_app
    from hashvault.config import Config

    setup_logging(args.log_level)

    host = args.host or '0.0.0.0'
    port = args.port or Config.PORT
    debug = args.debug if args.debug is not None else Config.DEBUG

    app = create_app(components=components)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting {label} on {host}:{port}")

    app.run(debug=debug, host=host, port=port)


def cmd_content_service(args):
    """Start the content service."""
    _run(args, ('content',), 'content service')


def cmd_reference_service(args):
    """Start the reference service."""
    _run(args, ('references',), 'reference service')


def cmd_serve(args):
    """Start both services in one process."""
    _run(args, ('content', 'references'), 'content and reference services')


def cmd_init_db(args):
    """Create database tables."""
    from hashvault.config import Config
    from hashvault.models.base import init_db

    setup_logging(args.log_level)

    database_url = args.database_url or Config.DATABASE_URL
    engine = init_db(database_url)
    engine.dispose()

    logging.getLogger(__name__).info(f"Database initialized at {database_url}")


def _add_server_arguments(parser):
    parser.add_argument(
        '--host',
        help='Host to bind to (default: 0.0.0.0)'
    )
    parser.add_argument(
        '--port',
        type=int,
        help='Port to bind to (default: from config)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode'
    )
    parser.add_argument(
        '--no-debug',
        dest='debug',
        action='store_false',
        help='Disable debug mode'
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='hashvault - content-addressed object store and reference service',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the content service
  %(prog)s content-service --port 5002

  # Start the reference service against a remote content service
  CONTENT_SERVICE_URL=http://localhost:5002 %(prog)s reference-service --port 5003

  # Run both in one process
  %(prog)s serve
"""
    )

    # Global options
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Set the logging level (default: INFO)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        required=True
    )

    content_parser = subparsers.add_parser(
        'content-service',
        help='Start the content service',
        description='Serve blobs, trees and commits under /api/content'
    )
    _add_server_arguments(content_parser)
    content_parser.set_defaults(func=cmd_content_service, debug=None)

    reference_parser = subparsers.add_parser(
        'reference-service',
        help='Start the reference service',
        description='Serve the main pointer and tags under /api/references'
    )
    _add_server_arguments(reference_parser)
    reference_parser.set_defaults(func=cmd_reference_service, debug=None)

    serve_parser = subparsers.add_parser(
        'serve',
        help='Start both services in one process'
    )
    _add_server_arguments(serve_parser)
    serve_parser.set_defaults(func=cmd_serve, debug=None)

    init_parser = subparsers.add_parser(
        'init-db',
        help='Create database tables'
    )
    init_parser.add_argument(
        '--database-url',
        help='SQLAlchemy database URL (default: from config)'
    )
    init_parser.set_defaults(func=cmd_init_db)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == '__main__':
    main()
