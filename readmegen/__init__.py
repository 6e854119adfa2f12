"""README generation for Terraform/OpenTofu modules.

Scans module files for variable and output declarations, classifies
variables into required, trigger, conditional and optional inputs, and
renders usage examples showing which inputs each trigger value requires.
"""

__version__ = "0.1.0"
