#Turn this directory into a package by adding an __init__.py file
#Docstring for the package
"""
Deposit Reconciliation Pipeline

This package contains the core modules for:

- Loading bank statement exports and store table dumps
- Cleaning and normalizing statement rows
- Matching deposits to outstanding transactions (single and split payments)
- Applying accepted matches and exporting review workbooks

Subpackages:
- core
- cleaning
- engines
- outputs

"""

#Import modules to be exposed at the package level
from . import core, cleaning, engines, outputs
__all__ = [
    "core",
    "cleaning",
    "engines",
    "outputs",
]
