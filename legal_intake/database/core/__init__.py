"""
The `core` package holds the transactional service functions that sit between
the intake pipeline and the DAOs.
"""
