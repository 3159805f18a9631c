"""Test package initialization."""

import os

# Keep tests on the local JSON strategy regardless of the developer's .env
os.environ["STORAGE_BACKEND"] = "local"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("PUBLIC_BASE_URL", "")
