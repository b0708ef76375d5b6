"""cabal-builder - drive cabal builds and classify their diagnostics."""

__version__ = "0.1.0"
