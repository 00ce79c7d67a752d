"""
Runtime configuration.

Values come from the environment (a local .env file is honoured) and fall
back to the defaults below.

    HOST_FINDER_API_URL   scoring service endpoint
    HOST_FINDER_TIMEOUT   request timeout in seconds
    HOST_FINDER_LOG_DIR   directory for the rotating app.log
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent

API_URL         = os.getenv("HOST_FINDER_API_URL", "https://host-finder.adamlebowski.workers.dev/api/find-hosts")
REQUEST_TIMEOUT = float(os.getenv("HOST_FINDER_TIMEOUT", "60"))
LOG_DIR         = Path(os.getenv("HOST_FINDER_LOG_DIR", str(ROOT_DIR / "logs")))
LOG_FILE        = LOG_DIR / "app.log"
