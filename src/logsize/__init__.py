"""logsize - sum response sizes across a directory of access logs."""

from logsize.__version__ import __version__


__all__ = ['__version__']
