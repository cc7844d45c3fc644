"""Filter token classification and compilation."""
