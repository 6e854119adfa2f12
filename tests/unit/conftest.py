"""Shared fixtures: a small S3 module with one trigger and one conditional."""

import pytest

from readmegen.interfaces.module import ModuleContext, ModuleMeta
from readmegen.strategies.scanners import HclRegexScanner
from readmegen.strategies.usage import classify

S3_VARIABLES = """\
variable "bucket_name" {
  description = "Name of the bucket"
  type        = string
}

variable "storage_class" {
  description = "Storage class of the bucket"
  type        = string

  validation {
    condition     = contains(["standard", "glacier"], var.storage_class)
    error_message = "storage_class must be standard or glacier."
  }
}

variable "glacier_days" {
  description = "Days before objects transition to glacier"
  type        = number
  default     = null

  validation {
    condition     = var.storage_class != "glacier" || var.glacier_days != null
    error_message = "glacier_days is required when storage_class is glacier."
  }
}

variable "tags" {
  description = "Tags to apply"
  type        = map(string)
  default     = {}
}
"""

S3_OUTPUTS = """\
output "bucket_arn" {
  description = "ARN of the bucket"
  value       = aws_s3_bucket.this.arn
}

output "bucket_id" {
  value = aws_s3_bucket.this.id
}
"""

S3_SOURCE = "git::https://github.com/acme/infra.git//modules/s3?ref=v1.2.0"


@pytest.fixture
def s3_files() -> dict[str, str]:
    """Module files of the S3 module."""
    return {"outputs.tf": S3_OUTPUTS, "variables.tf": S3_VARIABLES}


@pytest.fixture
def s3_meta() -> ModuleMeta:
    return ModuleMeta(name="s3", source=S3_SOURCE, version="v1.2.0")


@pytest.fixture
def s3_context(s3_files, s3_meta) -> ModuleContext:
    """Classified context of the S3 module."""
    scanner = HclRegexScanner()
    variables = scanner.scan_variables(s3_files["variables.tf"])
    return ModuleContext(
        meta=s3_meta,
        declarations=variables,
        classified=classify(variables),
        outputs=scanner.scan_outputs(s3_files["outputs.tf"]),
        files=s3_files,
    )
