class TopologyError(Exception):
    """Raised for malformed device trees (unknown parent, duplicate name)."""
