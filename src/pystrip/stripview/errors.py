class LayerMismatchError(ValueError):
    """Raised when layered data does not line up with the store or the legends."""
