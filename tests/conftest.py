from __future__ import annotations

import os
import sys
from pathlib import Path


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.lookup_service',
    # and the tests dir for the shared fakes module
    here = Path(__file__).resolve().parent
    for path in (here.parent, here):
        if str(path) not in sys.path:
            sys.path.insert(0, str(path))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")
    os.environ.setdefault("API_TRACE", "false")
    os.environ.setdefault("PEER_CHANNEL", "none")
