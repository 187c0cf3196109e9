#!/usr/bin/env python3
"""
CLI script to load the sample categories and events.
Run against a development database before starting the API.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from charity_events.db import DatabaseError
from charity_events.db.seed import seed_database
from charity_events.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

def main():
    parser = argparse.ArgumentParser(description='Seed the database with sample charity events')
    parser.add_argument(
        '--reset',
        action='store_true',
        help='Drop all tables before seeding'
    )
    args = parser.parse_args()

    setup_logging()

    try:
        categories, events = seed_database(reset=args.reset)
        logger.info(f"Database contains {categories} sample categories; added {events} events")
        return 0
    except DatabaseError as e:
        logger.error(f"Failed to seed database: {e}")
        return 1

if __name__ == '__main__':
    sys.exit(main())
