"""
Code Insight - multi-tab streaming code analysis engine.

Runs one chat-completion stream per analysis tab for the active source
file, caches the results per file, and keeps a side panel in sync while
the user switches files, toggles tabs and regenerates.
"""

__version__ = "1.0.0"
