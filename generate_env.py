#!/usr/bin/env python3
"""
Environment Configuration Generator for the Inventory Management Service

This script generates a .env file with:
- Random SECRET_KEY and JWT_SECRET
- A random password for the bootstrap admin user
- Database and server settings

Usage:
    python generate_env.py              # Interactive mode
    python generate_env.py --force      # Overwrite existing .env
    python generate_env.py --dev        # Development mode (predictable values)
    python generate_env.py --mysql      # Emit DB_* settings for a MySQL server
"""

import argparse
import os
import secrets
import shutil
import string
import sys
from datetime import datetime
from pathlib import Path


class EnvGenerator:
    """Generate environment configuration"""

    def __init__(self, dev_mode=False, mysql=False):
        self.dev_mode = dev_mode
        self.mysql = mysql
        self.env_file = Path(__file__).parent / '.env'

    def generate_secret_key(self, length=64):
        if self.dev_mode:
            return "dev-secret-key-DO-NOT-USE-IN-PRODUCTION"
        return secrets.token_hex(length)

    def generate_password(self, length=20, include_special=True):
        """
        Generate a random password with at least one lowercase, uppercase and digit

        Args:
            length: Password length (default: 20)
            include_special: Include special characters (default: True)
        """
        if self.dev_mode:
            return "admin987654321!"

        lowercase = string.ascii_lowercase
        uppercase = string.ascii_uppercase
        digits = string.digits
        # Safe special characters for .env files (avoid #, =, :, quotes)
        special = "!@$%^&*()_+-[]{}|;.,<>?"

        password = [
            secrets.choice(lowercase),
            secrets.choice(uppercase),
            secrets.choice(digits),
        ]
        if include_special:
            password.append(secrets.choice(special))

        all_chars = lowercase + uppercase + digits
        if include_special:
            all_chars += special

        for _ in range(length - len(password)):
            password.append(secrets.choice(all_chars))

        secrets.SystemRandom().shuffle(password)
        return ''.join(password)

    def database_section(self):
        if self.mysql:
            db_password = self.generate_password(include_special=False)
            return f"""DB_HOST=localhost
DB_PORT=3306
DB_USER=inventory
DB_PASSWORD="{db_password}"
DB_NAME=inventory_management
DB_POOL_SIZE=10""", 'mysql://inventory@localhost:3306/inventory_management'
        return "# DATABASE_URL unset: SQLite file at instance/inventory.db", 'sqlite (instance/inventory.db)'

    def create_env_content(self):
        secret_key = self.generate_secret_key()
        jwt_secret = self.generate_secret_key()
        admin_password = self.generate_password()
        database_block, database_label = self.database_section()
        production = not self.dev_mode

        content = f"""# Inventory Management Service Environment Configuration
# Generated: {self._get_timestamp()}
#
# SECURITY WARNING: Keep this file secret! Never commit to version control!

# ============================================================================
# Flask Configuration
# ============================================================================

SECRET_KEY={secret_key}

# Signs the auth-token cookie; falls back to SECRET_KEY when unset
JWT_SECRET={jwt_secret}

# 'development' or 'production'
APP_ENV={'production' if production else 'development'}

# WARNING: NEVER set to True in production!
FLASK_DEBUG=False
FLASK_HOST=127.0.0.1
FLASK_PORT=5000

# ============================================================================
# Database Configuration
# ============================================================================

{database_block}

# ============================================================================
# Bootstrap Admin
# ============================================================================
# Created by 'python app.py' when no user with this name exists

ADMIN_USERNAME=admin
ADMIN_USER_PASSWORD="{admin_password}"

# ============================================================================
# Security Settings
# ============================================================================

# Set to False ONLY for development over plain HTTP
AUTH_COOKIE_SECURE={'True' if production else 'False'}
LOGIN_RATE_LIMIT=10 per minute

# ============================================================================
# Application Settings
# ============================================================================

LOW_STOCK_THRESHOLD=10
LOG_LEVEL=INFO
"""
        return content, {
            'admin_password': admin_password,
            'database': database_label,
        }

    def _get_timestamp(self):
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def file_exists(self):
        return self.env_file.exists()

    def create_backup(self):
        if not self.file_exists():
            return None
        backup_path = self.env_file.parent / f'.env.backup.{self._get_timestamp().replace(":", "-").replace(" ", "_")}'
        shutil.copy2(self.env_file, backup_path)
        return backup_path

    def write_env_file(self, content):
        with open(self.env_file, 'w') as f:
            f.write(content)
        # Owner read/write only
        os.chmod(self.env_file, 0o600)

    def display_credentials(self, credentials):
        print("\n" + "=" * 80)
        print("GENERATED CREDENTIALS - SAVE THESE SECURELY!")
        print("=" * 80)
        print("\nAdmin User:")
        print("   - Username: admin")
        print(f"   - Password: {credentials['admin_password']}")
        print(f"\nDatabase: {credentials['database']}")
        print("\nNext Steps:")
        print("   1. Run: python app.py --build-only  (create tables and admin)")
        print("   2. Run: python app.py               (start the server)")
        print("   3. Keep .env secure (never commit to git)")
        if self.dev_mode:
            print("\nDEV MODE: predictable secrets, DO NOT use in production!")
        print("\n" + "=" * 80 + "\n")

    def generate(self, force=False):
        if self.file_exists() and not force:
            print(f"\nFile {self.env_file} already exists!")
            response = input("Do you want to overwrite it? (yes/no): ").lower().strip()
            if response not in ['yes', 'y']:
                print("Aborted. Existing .env file was not modified.")
                return False
            backup_path = self.create_backup()
            if backup_path:
                print(f"Backup created: {backup_path}")

        content, credentials = self.create_env_content()
        self.write_env_file(content)
        print(f"Created: {self.env_file}")
        self.display_credentials(credentials)
        return True


def main():
    parser = argparse.ArgumentParser(description='Generate .env configuration for the Inventory Management Service')
    parser.add_argument('--force', '-f', action='store_true',
                        help='Overwrite existing .env file without prompting')
    parser.add_argument('--dev', '-d', action='store_true',
                        help='Development mode: predictable values (NOT FOR PRODUCTION!)')
    parser.add_argument('--mysql', action='store_true',
                        help='Write DB_* settings for a MySQL server instead of the SQLite default')
    args = parser.parse_args()

    generator = EnvGenerator(dev_mode=args.dev, mysql=args.mysql)
    sys.exit(0 if generator.generate(force=args.force) else 1)


if __name__ == '__main__':
    main()
