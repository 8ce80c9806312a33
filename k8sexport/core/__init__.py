"""Decode-and-dispatch pipeline: revision keys, envelopes, rendering, export."""
