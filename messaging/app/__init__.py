# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Messaging service application package."""

__version__ = "0.1.0"
