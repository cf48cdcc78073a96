"""Messaging transports. Pure I/O, no reply logic."""
