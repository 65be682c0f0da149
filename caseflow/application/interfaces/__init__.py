"""Ports (Protocols) the engine depends on; infrastructure implements them."""
