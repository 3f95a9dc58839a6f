# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Main entry point for running usf_client as a module.

Allows running:
    python -m usf_client find --query '{"packageQuantity": {"$gt": 0}}'
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
