"""Serbia Weather widget app"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("serbia-weather")
except PackageNotFoundError:
    __version__ = "dev"
