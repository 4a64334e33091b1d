"""cartsync: a session shopping cart kept in step with a remote inventory."""

__version__ = "0.1.0"
