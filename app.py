#!/usr/bin/env python3
"""
Run script for the Inventory Management Service
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from inventory_app import create_app
from inventory_app.build import build_database
from inventory_app.logger import get_logger

# Note: Secrets and the bootstrap admin password are read from the environment.
# Run 'python generate_env.py' to create a .env file with random values.

logger = get_logger("inventory.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Inventory Management Service')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and the bootstrap admin, then exit without starting the server')
    parser.add_argument('--no-seed', action='store_false', dest='seed_admin',
                        help='Do not create the bootstrap admin user')
    parser.add_argument('--host', default=None,
                        help='Server host (default: FLASK_HOST or 127.0.0.1)')
    parser.add_argument('--port', type=int, default=None,
                        help='Server port (default: FLASK_PORT or 5000)')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    app = create_app()
    build_database(app, seed_admin=args.seed_admin)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    host = args.host or os.environ.get('FLASK_HOST', '127.0.0.1')
    port = args.port or int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode})")
    app.run(debug=debug_mode, host=host, port=port)
