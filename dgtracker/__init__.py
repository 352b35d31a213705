"""Disc golf round tracking and rating service."""
