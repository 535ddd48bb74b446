# Cratchit — Message-Driven Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Cratchit core package.

A single-session command interpreter: messages drive a pure update of the
model, the model is rendered, and a durable key-value environment survives
restarts.
"""
from .kernel import Cratchit as Cratchit  # noqa: F401 (re-export)
