"""Inbound HTTP surface of the hub."""
