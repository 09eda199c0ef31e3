"""Runtime settings for the BibTeX importer."""
from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_UNKNOWN_EMAIL_DOMAIN = "unknown.edu"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ImporterSettings:
    unknown_email_domain: str = DEFAULT_UNKNOWN_EMAIL_DOMAIN
    require_authors: bool = True

    @classmethod
    def from_env(cls) -> "ImporterSettings":
        """Build settings from ``ARTIGADOR_*`` environment variables."""
        domain = os.getenv("ARTIGADOR_UNKNOWN_EMAIL_DOMAIN", DEFAULT_UNKNOWN_EMAIL_DOMAIN).strip()
        require = os.getenv("ARTIGADOR_REQUIRE_AUTHORS", "true").strip().lower()
        return cls(
            unknown_email_domain=domain or DEFAULT_UNKNOWN_EMAIL_DOMAIN,
            require_authors=require not in _FALSE_VALUES,
        )
