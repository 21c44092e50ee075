"""dnaview - Views onto self-describing binary containers."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dnaview")
except PackageNotFoundError:
    __version__ = "(local)"
