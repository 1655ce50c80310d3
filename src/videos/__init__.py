"""Video library for SmartPlay.

This package resolves YouTube URLs, fetches transcripts, and stores each
user's videos together with their question/answer history.
"""
