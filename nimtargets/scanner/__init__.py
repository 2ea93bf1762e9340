# SPDX-License-Identifier: BSD-3-Clause
"""
Target scanning library: extraction, probing, catalog merge and verification.
"""
