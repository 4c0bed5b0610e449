"""An LC-3 virtual machine and loader helpers, small text utilities, a printf formatter, a Park-Miller generator and a shell command parser."""

__version__ = "0.1.0"