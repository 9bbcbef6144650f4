"""Tests for waka_readme."""
