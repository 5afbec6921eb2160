"""Pure mapping, aggregation and batching logic. No I/O."""
