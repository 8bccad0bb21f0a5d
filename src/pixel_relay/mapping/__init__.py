"""Per-event mapping functions and the route table."""
