"""Cavavin catalog API."""
