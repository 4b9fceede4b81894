"""state_data_prep package initializer.

This package prepares BLS occupational employment tables, census state
population estimates and state case counts for later analysis.  See
individual module docstrings for details.
"""
