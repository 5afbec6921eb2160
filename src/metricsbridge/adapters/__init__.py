"""Adapters connecting the mapping core to files and the monitoring backend."""
