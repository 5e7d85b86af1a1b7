"""Typed device values with a BSON form, MQTT topic parsing and property store errors."""

__version__ = "0.1.0"