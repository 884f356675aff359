"""Store services: content addressing, codec, and coordination helpers."""
