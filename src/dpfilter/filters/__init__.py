"""String, string-map and datapoint filters."""
