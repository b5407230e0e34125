"""Manufacturer specific codecs."""
