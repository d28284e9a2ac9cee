# Makes `from src.npkeras ...` importable when pytest runs from the repo root.
