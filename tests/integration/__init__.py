"""Integration tests for the blogskin CLI.

These tests exercise the skin backend client against mocked HTTP sessions
and drive the command line end to end.
"""
