"""State/store layer.

This package is the single source of truth for the interaction state of a
mounted map: search text and results, the selected destination, the user's
position and the two coupled visibility toggles. Every other component
observes it through subscriptions and never mutates it directly.
"""
