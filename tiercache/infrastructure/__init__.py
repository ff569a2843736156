"""Infrastructure Layer: Contains concrete implementations and adapters.

The file cache itself, directory suppliers, configuration, logging setup and
the rich console display.
"""
