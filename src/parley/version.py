"""Driver version.

Bump the patch for fixes, the minor for new options or event handling,
the major when the service binding changes.
"""

__version__ = "0.1.0"
