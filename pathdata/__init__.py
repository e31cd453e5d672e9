"""SVG path-data interpretation, measurement, flattening, and edge classification."""
