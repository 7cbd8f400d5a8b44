#!/usr/bin/env python3
"""Create an API user that can log in and manage translations.

Usage:
    python scripts/create_user.py --name Admin --email admin@example.com --password secret
"""

import argparse
import os
import sys

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.models import User


def create_user(name: str, email: str, password: str):
    """Create a user, or return None if the email is already registered."""
    email = email.strip().lower()

    if User.query.filter_by(email=email).first():
        print(f"❌ A user with email {email} already exists")
        return None

    user = User(name=name, email=email)
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    print(f"✅ Created user {user.email} (ID: {user.id})")
    return user


def main(argv=None):
    parser = argparse.ArgumentParser(description='Create an API user')
    parser.add_argument('--name', required=True)
    parser.add_argument('--email', required=True)
    parser.add_argument('--password', required=True)
    args = parser.parse_args(argv)

    app = create_app(os.getenv('FLASK_ENV', 'development'))
    with app.app_context():
        user = create_user(args.name, args.email, args.password)

    return 0 if user else 1


if __name__ == '__main__':
    sys.exit(main())
