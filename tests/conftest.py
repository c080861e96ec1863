"""Test environment: in-memory storage and fixed secrets, set before app import."""

import os

os.environ.setdefault("STORAGE", "memory")
os.environ.setdefault("BASE_PASSWORD", "parola-test")
os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
