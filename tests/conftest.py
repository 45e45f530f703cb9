"""Pytest configuration shared across tests."""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; give them deterministic test values
# regardless of the shell environment.
os.environ["ENCRYPTION_KEY"] = "test-encryption-key-0123456789-abcdefghijklmnop"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
