"""Bootstrap exception types.

Convention:
- ``OSError`` (including ``shutil.Error``): raised by filesystem helpers
  while restoring a category. The restorer catches it, logs it, and reports
  that category as failed; other categories and the gateway launch proceed.
- ``ConfigDocumentError``: the configuration document on disk is not a JSON
  object. The loader logs it and starts from an empty document instead.

Nothing in the bootstrap phase is allowed to stop the gateway from starting,
except failing to exec the gateway itself.
"""

from __future__ import annotations


class ConfigDocumentError(ValueError):
    """Raised when a configuration document cannot be decoded into a JSON object."""
