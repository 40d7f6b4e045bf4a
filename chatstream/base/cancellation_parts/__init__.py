"""Cancellation implementation parts; import from ``chatstream.base.cancellation``."""
