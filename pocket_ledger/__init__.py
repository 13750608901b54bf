"""Pocket Ledger - personal finance tracker (Flask API + Streamlit client)."""

__version__ = "0.1.0"
