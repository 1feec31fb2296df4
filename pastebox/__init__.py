"""Pastebox: text paste sharing with expiring and burn-after-reading pastes."""
