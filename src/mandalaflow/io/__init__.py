"""Headless frame export."""
