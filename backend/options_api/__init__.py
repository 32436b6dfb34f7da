"""
eProcurement reference options API.

Serves every registered option kind through one generic lifecycle
service; see options_api.registry for the list of kinds.
"""

__version__ = "0.1.0"
