"""Ingestion helpers.

Defensive parsing of provider values before they reach the models.
"""
