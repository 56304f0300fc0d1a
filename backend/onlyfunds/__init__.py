"""
OnlyFunds personal finance tracker backend.
"""
