class ConflictError(Exception):
    """A uniqueness rule rejected the write (duplicate email, token or connection pair)."""
