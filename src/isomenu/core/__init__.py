"""Menu model, filters and navigation state."""
