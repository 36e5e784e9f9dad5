"""Análise inteligente do mercado de pneus (SERP + Gemini)."""

__version__ = "0.1.0"
