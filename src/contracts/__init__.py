"""Shared websocket and command contracts."""
