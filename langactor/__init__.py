"""An in-process actor framework with mailboxes, backpressure policies, child actors and an address book."""

__version__ = "0.1.0"