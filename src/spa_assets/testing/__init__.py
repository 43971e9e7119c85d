"""Test utilities for asset apps.

    from spa_assets.testing import TestClient
"""

from spa_assets.testing.client import TestClient

__all__ = ["TestClient"]
