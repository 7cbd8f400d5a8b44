#!/usr/bin/env python
"""Database initialization script for the translation service.

Creates the users and translations tables (with the key/locale unique
constraint and lookup indexes) from the SQLAlchemy models.

Usage:
    python init_db.py
"""

import os
import sys
from sqlalchemy import inspect
from app import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
            db.create_all()

            inspector = inspect(db.engine)
            print("Tables:")
            for table_name in inspector.get_table_names():
                indexes = [index['name'] for index in inspector.get_indexes(table_name)]
                print(f"  ✓ {table_name:<15} indexes: {', '.join(indexes) or '-'}")

            print("\n✅ Database initialization complete!")
            print("Next steps:")
            print("  1. Create an API user: python scripts/create_user.py --name Admin --email admin@example.com --password secret")
            print("  2. Start the server: python wsgi.py\n")
            return True

        except Exception as e:
            print(f"❌ Error creating database: {type(e).__name__}: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
