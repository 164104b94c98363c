"""VocaLoop: vocabulary learning with adaptive scoring."""

__version__ = "0.1.0"
