"""Domain libraries: places provider, caches, storage, geo, photos, and membership diffing."""
