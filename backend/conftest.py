# Ensure '<repo>/backend' is on sys.path so 'import directory.*' works
# even when pytest is started from the repository root.
import os
from pathlib import Path
import sys

_BACKEND_DIR = Path(__file__).resolve().parent  # <repo>/backend
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))

# Never touch the on-disk development database from tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CI", "true")
