from studydeck.consts import VERSION

__version__ = VERSION
