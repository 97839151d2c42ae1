#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Defaults to a local SQLite ledger and console email so nothing leaves
the machine.
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("DATABASE_URL", "sqlite:///./studiobook.db")
os.environ.setdefault("EMAIL_PROVIDER", "console")

import uvicorn

if __name__ == "__main__":
    print("Starting studio booking API on http://localhost:8000 (docs at /docs)")
    uvicorn.run("studiobook.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
