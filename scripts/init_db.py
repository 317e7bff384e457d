#!/usr/bin/env python3
"""
Initialize the hashvault database schema.

Usage:
    python scripts/init_db.py          # Create missing tables
    python scripts/init_db.py --reset  # Drop all tables and recreate (DANGEROUS!)
"""

import argparse

from hashvault.config import Config
from hashvault.models.base import Base, init_db


def main():
    parser = argparse.ArgumentParser(description='Initialize database schema')
    parser.add_argument('--reset', action='store_true',
                        help='Drop existing tables and recreate (DANGEROUS!)')
    parser.add_argument('--database-url', default=Config.DATABASE_URL,
                        help='SQLAlchemy database URL (default: from config)')
    args = parser.parse_args()

    engine = init_db(args.database_url, echo=True)

    if args.reset:
        response = input("Are you sure? This will delete ALL objects and references! (yes/no): ")
        if response.lower() != 'yes':
            print("Aborted.")
            return
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        print("Dropped and recreated all tables.")

    engine.dispose()
    print(f"Database initialized at: {args.database_url}")


if __name__ == '__main__':
    main()
