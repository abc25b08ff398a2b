"""
m2cv - Markdown to CV

A file-based workflow for tailoring a base resume to individual job applications.

Architecture:
- Configuration Context: Project config discovery, loading, and initialization
- Application Context: Application folders, job descriptions, and versioned revisions
- Session Context: Interactive optimization sessions served to an external agent
"""

__version__ = "0.1.0"
