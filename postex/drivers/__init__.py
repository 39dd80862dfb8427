"""Transport implementations of the session port."""
