"""Tests for VocaLoop."""
