import os
import sys

# Ensure imports like `from app.main import app` work when pytest is run from repo root
BACKEND_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

# Tests never talk to a real Redis, and plain logs read better in failures
os.environ.setdefault("CACHE_DISABLE", "1")
os.environ.setdefault("ENABLE_JSON_LOGS", "0")
