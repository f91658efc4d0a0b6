"""Eco-quest progression backend."""
