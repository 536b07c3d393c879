"""Collaborator services package.

Contains the response logging sinks a client can forward raw Bot API
responses to.
"""
