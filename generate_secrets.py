#!/usr/bin/env python3
"""
Generate secure secrets for Spread Pick'em
Run this script to generate the required SECRET_KEY and the operator ADMIN_KEY
"""

import secrets


def generate_secrets():
    """Generate secure random keys for the application"""
    print("🔐 Generating secure secrets for Spread Pick'em...")
    print("=" * 50)

    secret_key = secrets.token_urlsafe(32)
    admin_key = secrets.token_urlsafe(24)

    print(f"SECRET_KEY={secret_key}")
    print(f"ADMIN_KEY={admin_key}")

    print("=" * 50)
    print("📝 Copy these values to your .env file")
    print("🔑 Send ADMIN_KEY as the X-Admin-Key header when reporting scores")
    print("⚠️  Keep these secrets secure and never commit them to version control!")


if __name__ == "__main__":
    generate_secrets()
