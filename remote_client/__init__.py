"""Resilient WebSocket client for the local remote-control endpoint."""
