"""
Banana Studio - Generation session core

Tracks in-flight image and video generation requests against a remote
generation service and keeps a bounded, durable history of the results.
"""

__version__ = "1.0.0"
__author__ = "Banana Studio Contributors"
