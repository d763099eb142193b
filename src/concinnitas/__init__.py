"""
concinnitas - AI-guided design process skills for OpenCode.
"""

__version__ = "1.0.0"
