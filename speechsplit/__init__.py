"""speechsplit — validate media, extract audio and split it under a size budget."""

__version__ = "0.1.0"
