"""Unit tests for the database layer in aimusic_studio/core/database."""
