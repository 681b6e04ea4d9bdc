from __future__ import annotations

import os
import sys
from pathlib import Path

# Add backend folder to sys.path so `import citepay...` works in tests when running from backend root
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# The database module builds its engine at import time; point it at SQLite
# before anything imports it.  No connection is opened until a query runs.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest

from factories import InMemoryReceiptRepository, make_line, make_payment


@pytest.fixture
def scenario_a_repository() -> InMemoryReceiptRepository:
    """R-0001: two violations, 500.00 first offense and 1000.00 second offense."""
    return InMemoryReceiptRepository(
        payments={"R-0001": make_payment()},
        violations={
            1: [
                make_line("No helmet", "500.00", "750.00", "1000.00", offense_count=1),
                make_line("Reckless driving", "500.00", "1000.00", "1500.00", offense_count=2),
            ]
        },
    )
