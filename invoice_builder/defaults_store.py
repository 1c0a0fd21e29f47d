"""Company details and payment instructions remembered between sessions.

The file is a JSON object of string keys; this app only owns one of them
(``invoiceDefaults``). Reads never raise: anything unexpected is treated as
"no saved defaults".
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from invoice_builder.errors import DefaultsStoreError
from invoice_builder.models import Issuer, PersistedDefaults

logger = logging.getLogger(__name__)

STORAGE_KEY = "invoiceDefaults"


class DefaultsStore:
    def __init__(self, path: Path, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def load(self) -> Optional[PersistedDefaults]:
        try:
            raw = self._read_all()
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable defaults file %s: %s", self.path, e)
            return None
        value = raw.get(self.key)
        if value is None:
            return None
        defaults = _parse_defaults(value)
        if defaults is None:
            logger.warning("Ignoring malformed defaults under key %r in %s", self.key, self.path)
        return defaults

    def save(self, defaults: PersistedDefaults) -> None:
        try:
            try:
                data = self._read_all()
            except ValueError:
                # Corrupt file is replaced.
                data = {}
            data[self.key] = defaults.to_dict()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".defaults-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise DefaultsStoreError(f"Could not write defaults to {self.path}: {e}") from e
        logger.info("Saved invoice defaults to %s", self.path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("top-level value is not an object")
        return data


def _parse_defaults(value: Any) -> Optional[PersistedDefaults]:
    if not isinstance(value, dict):
        return None
    issuer_raw = value.get("issuer", {})
    payment = value.get("payment_instructions") or ""
    if not isinstance(issuer_raw, dict) or not isinstance(payment, str):
        return None

    issuer_fields = {}
    for name in Issuer().to_dict():
        v = issuer_raw.get(name)
        if v is None:
            v = ""
        elif not isinstance(v, str):
            return None
        issuer_fields[name] = v
    return PersistedDefaults(issuer=Issuer(**issuer_fields), payment_instructions=payment)
