"""Teaching toolkit: stack and list examples, MIPS COFF/NOFF tools, a MIPS interpreter and a directory table."""

__version__ = "0.1.0"