"""Motiva protected data backend."""
