"""Report outputs — narrative text and yearly tables."""
