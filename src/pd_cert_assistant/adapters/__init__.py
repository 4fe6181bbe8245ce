"""Adapters connecting the reconciliation engine to HTTP peers and Kubernetes."""
