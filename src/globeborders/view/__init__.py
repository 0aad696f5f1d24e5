"""
The VIEW layer converts core output into PyVista datasets for preview and export.
"""
