# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Root conftest.py making the adapters and the messaging service importable."""

import sys
from pathlib import Path

_repo_root = Path(__file__).parent

# Adapters are importable without installation; the service directory provides `main` and `app`
for _path in [*sorted((_repo_root / "adapters").glob("fieldops_*")), _repo_root / "messaging", _repo_root]:
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that exercise the HTTP API through TestClient")
