"""Persistence and translation pipeline for the multilingual service pages."""
