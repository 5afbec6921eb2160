"""Wire encodings for output records."""
