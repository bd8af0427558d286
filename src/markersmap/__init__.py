"""Compiles a USX RelaxNG schema into a USFM/USX/USJ markers map."""

__version__ = "0.1.0"
