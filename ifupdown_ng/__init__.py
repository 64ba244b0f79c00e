"""Network interface configuration: parse interfaces files, bring interfaces up and down, query them."""

__version__ = "0.11.3"