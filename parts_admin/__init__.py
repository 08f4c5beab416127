"""Back-office service for the Zorraga auto-parts storefront."""

__version__ = "0.1.0"
