"""Root conftest: export .env.test before whatsapp_console.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parent / ".env.test"

for raw in ENV_FILE.read_text().splitlines() if ENV_FILE.exists() else []:
    key, sep, value = raw.strip().partition("=")
    if not sep or key.startswith("#"):
        continue
    # Values already set in the shell win, so CI can point at its own services.
    os.environ.setdefault(key.strip(), value.strip().strip('"'))
