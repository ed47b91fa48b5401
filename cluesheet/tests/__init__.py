"""Tests for the cluesheet engine, session and API layers."""
