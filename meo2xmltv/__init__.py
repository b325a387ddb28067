"""
MEO to XMLTV grabber

Fetches programme listings from the MEO web guide and writes them as XMLTV.
"""

__version__ = '1.0.0'
