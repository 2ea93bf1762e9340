# SPDX-License-Identifier: BSD-3-Clause
"""
Nim compilation target scanner.

Discovers which (OS, CPU) pairs the installed Nim compiler supports by
mining its help output, merging the result with the documented target
lists, and optionally verifying each pair with a test compilation.
"""

__version__ = '0.1.0'
