"""Bot API client package.

Contains query building, the declarative method manifest and the sync and
async clients that expose one wrapper per supported Bot API method.
"""
