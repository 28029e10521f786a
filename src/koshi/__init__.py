"""Koshi: generate Jujutsu change descriptions with AI and sync them to GitHub PRs."""

__version__ = "0.1.0"
