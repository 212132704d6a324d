"""Artifact generators for rpglemap."""

from artifacts.generators.symbols import SymbolsGenerator

__all__ = ["SymbolsGenerator"]
