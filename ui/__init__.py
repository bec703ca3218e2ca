"""
Streamlit presentation layer for the trade journal.
"""
