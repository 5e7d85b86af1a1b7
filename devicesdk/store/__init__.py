"""Errors for reporting failed property store operations."""