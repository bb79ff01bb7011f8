"""Test package. Environment defaults here apply before app settings are first loaded."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("TOKEN_CLEANUP_ENABLED", "false")
