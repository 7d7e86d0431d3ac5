"""
Lazy Firebase Admin initialization for the long-running dashboard service.
"""

from __future__ import annotations

import logging
from typing import Optional

import firebase_admin

logger = logging.getLogger(__name__)


def get_firebase_app(project_id: Optional[str] = None) -> firebase_admin.App:
    """Return the default Firebase app, initializing it exactly once."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(options=options)
    logger.info("Initialized Firebase Admin SDK (project %s)", app.project_id)
    return app
