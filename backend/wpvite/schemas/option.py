"""
WPVite Backend — Site Option Schemas
======================================

What:  Body of the first-run setup call. Options themselves travel as a
       plain {key: value} mapping and need no model.
"""

from typing import Optional

from wpvite.schemas.common import CamelModel


class SetupRequest(CamelModel):
    """
    Body of POST /api/setup.

    Example:
        {"siteTitle": "My Blog", "tagline": "Notes from the field"}
    """
    site_title: Optional[str] = None
    tagline: Optional[str] = None
