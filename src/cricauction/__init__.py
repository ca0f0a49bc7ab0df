"""Fantasy cricket auction backend."""
