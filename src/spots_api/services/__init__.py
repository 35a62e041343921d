"""Business logic: search, nearby, spots, photos, lists, and membership reconciliation."""
