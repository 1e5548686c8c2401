__version__ = "1.0.0"
ENGINE_VERSION = __version__
