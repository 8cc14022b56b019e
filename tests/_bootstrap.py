"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "GOOGLE_SERVICE_ACCOUNT_KEY": json.dumps(
        {
            "type": "service_account",
            "client_email": "dashboard@example.iam.gserviceaccount.com",
            "private_key": "test-key",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    ),
    "INVOICE_SHEET_ID": "invoice-sheet",
    "PAYSLIP_SHEET_ID": "payslip-sheet",
    "DASHBOARD_PASSWORD": "test-password",
    "SESSION_SECRET": "test-secret",
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
