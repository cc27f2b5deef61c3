"""
tokensync: design-token extraction with live-synchronised documentation.

Extracts styles and variables from a design document, resolves variable
aliases across modes, renders documentation rows onto the canvas and keeps
those rows in step with later edits.
"""

__version__ = "0.3.0"
