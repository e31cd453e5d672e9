"""Net layout, tab geometry, rendering, and the generate_net entry point."""
