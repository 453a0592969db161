from __future__ import annotations

ANONYMOUS = "Anonymous"
