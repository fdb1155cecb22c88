"""Infrastructure layer: persistence, polymorphic lookups and email delivery."""
