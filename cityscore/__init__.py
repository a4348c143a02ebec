#!python


__project__ = "cityscore"
__version__ = "0.3.0"
__license__ = "Apache"
__description__ = "Rank candidate cities by weighted, normalized multi-criteria scores"
__python_version__ = ">=3.10"
__console_scripts__ = [
    "cityscore=cityscore.cli:run",
]
