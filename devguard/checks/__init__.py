"""Checks over the repository snapshot."""
