"""Block hard-coded API keys and risky dependencies before they are committed.

proteccapi helps you:
- Scan staged files (or the whole tree) for API keys and secrets
- Move detected keys into a .env file that git ignores
- Audit npm dependencies for known vulnerabilities
- Flag typosquatting, lifecycle scripts and suspicious package code
"""

__version__ = "1.0.0"

from proteccapi.api import ScanOutcome, ScanStatus, scan, secure_check

__all__ = ["ScanOutcome", "ScanStatus", "__version__", "scan", "secure_check"]
