"""
Command-line interface for gedcom_graph (typer + rich).
"""
