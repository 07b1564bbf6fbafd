"""
macro-transforms Test Suite

This package contains tests for macro-transforms: the Hodrick-Prescott filter,
its banded penalty system, the collaborating data transforms, input
validation, the exception hierarchy and configuration management.
"""
