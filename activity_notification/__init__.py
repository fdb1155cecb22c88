"""Notification targets: indexing, grouping and email routing."""
